"""Startup banner — mode-aware status output.

Prints the project, compiler and URL summary when a command starts.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any

from docpreview.console import BOLD, COLOR, CYAN, DIM, GREEN, MAGENTA, RESET, YELLOW

if TYPE_CHECKING:
    from docpreview.config import PreviewConfig


_MODE_STYLES: dict[str, tuple[str, str]] = {
    "dev": (GREEN, "dev"),
    "make": (YELLOW, "make"),
    "diff": (YELLOW, "diff"),
    "serve": (CYAN, "serve"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (DIM, mode))
    return f"{color}[{label}]{RESET}"


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if the terminal supports it."""
    if not COLOR:
        return url
    return f"\033]8;;{url}\033\\{BOLD}{CYAN}{url}{RESET}\033]8;;\033\\"


def browse_url(config: PreviewConfig, manifest: dict[str, Any] | None) -> str:
    """URL opened in the browser: the project's page when there is one."""
    base = f"http://localhost:{config.port}"
    if manifest is not None and manifest.get("name") and manifest.get("version"):
        return f"{base}/packages/{manifest['name']}/{manifest['version']}/"
    return base


def print_banner(
    config: PreviewConfig,
    mode: str,
    *,
    compiler_version: str = "",
    manifest: dict[str, Any] | None = None,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the docpreview startup banner to stderr.

    Args:
        config: Resolved PreviewConfig.
        mode: One of ``"dev"``, ``"make"``, ``"diff"``, ``"serve"``.
        compiler_version: Version reported by the compiler.
        manifest: Project manifest, if a project was found.
        load_ms: Startup time in milliseconds.
        warnings: Optional list of warning messages to display.

    """
    from docpreview import __version__

    lines: list[str] = [
        "",
        f"  {BOLD}docpreview{RESET} {DIM}v{__version__}{RESET}  {_mode_badge(mode)}",
        f"  {DIM}{'─' * 43}{RESET}",
    ]

    timing = f" {DIM}in {load_ms:.0f}ms{RESET}" if load_ms > 0 else ""
    if compiler_version:
        lines.append(f"  {DIM}├─{RESET} using elm {compiler_version}{timing}")

    if mode == "serve":
        workers_label = str(config.workers) if config.workers > 0 else "auto"
        lines.append(f"  {DIM}├─{RESET} workers: {workers_label}")
        lines.append(f"  {DIM}├─{RESET} work dir: {DIM}{config.work_dir}{RESET}")
    elif manifest is not None and manifest.get("name") and manifest.get("version"):
        lines.append(
            f"  {DIM}├─{RESET} previewing {MAGENTA}{manifest['name']} "
            f"{manifest['version']}{RESET} from {DIM}{config.root}{RESET}"
        )
    else:
        lines.append(
            f"  {DIM}├─{RESET} no package or application found in {config.root}, "
            "running documentation server only"
        )

    if mode == "dev" and config.reload and manifest is not None:
        lines.append(
            f"  {DIM}├─{RESET} {GREEN}live{RESET} "
            f"SSE on {DIM}/__docpreview/events{RESET}"
        )

    if mode in ("dev", "serve"):
        url = f"http://{config.address}:{config.port}"
        lines.append("")
        lines.append(f"  Browse {_clickable_url(url)} to see your documentation")

    if warnings:
        lines.append("")
        lines.extend(f"  {YELLOW}!{RESET} {w}" for w in warnings)

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
