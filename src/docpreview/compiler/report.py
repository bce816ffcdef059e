"""Compile error reports — relativize paths and render for the terminal.

The compiler's ``--report=json`` output has the shape::

    {"type": "compile-errors",
     "errors": [{"path": ..., "problems": [{"title": ..., "message": [...]}]}]}

where each message chunk is either a plain string or a styled object with
``bold``, ``underline``, ``color`` and ``string`` keys.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from docpreview import console

_COLORS = {
    "green": "GREEN",
    "yellow": "YELLOW",
    "cyan": "CYAN",
    "RED": "RED",
    "red": "RED",
}

_HEADER_WIDTH = 63


def is_compile_errors(report: Any) -> bool:
    return isinstance(report, dict) and report.get("type") == "compile-errors"


def relativize_report(report: Any, build_dir: Path) -> Any:
    """Rewrite error paths in *report* relative to *build_dir* (in place)."""
    if not is_compile_errors(report):
        return report
    prefix = str(build_dir)
    for err in report.get("errors", []):
        path = err.get("path")
        if isinstance(path, str) and path.startswith(prefix):
            err["path"] = path[len(prefix) + 1 :]
    return report


def _chunk_to_string(chunk: Any) -> str:
    if isinstance(chunk, str):
        return chunk
    text = str(chunk.get("string", ""))
    if chunk.get("bold"):
        text = console.BOLD + text + console.RESET
    if chunk.get("underline"):
        text = console.UNDERLINE + text + console.RESET
    color = _COLORS.get(chunk.get("color") or "")
    if color is not None:
        text = getattr(console, color) + text + console.RESET
    return text


def _problem_to_string(path: str, problem: dict[str, Any]) -> str:
    title = problem.get("title", "")
    dashes = "-" * max(_HEADER_WIDTH - len(title) - len(path), 3)
    header = f"{console.CYAN}-- {title} {dashes} {path}{console.RESET}"
    body = "".join(_chunk_to_string(chunk) for chunk in problem.get("message", []))
    return f"{header}\n\n{body}"


def render_report(report: Any) -> str:
    """Render a compile error report in the compiler's own layout.

    Returns an empty string for anything that is not a compile error report.

    """
    if not is_compile_errors(report):
        return ""
    rendered = []
    for err in report.get("errors", []):
        path = err.get("path", "")
        problems = [_problem_to_string(path, p) for p in err.get("problems", [])]
        rendered.append("\n\n".join(problems))
    return "\n\n\n".join(rendered)


def summarize_report(report: Any) -> str:
    """One-line ``path: TITLE`` summary of a compile error report."""
    if not is_compile_errors(report):
        return "no documentation produced"
    problems = [
        f"{err.get('path', '')}: {problem.get('title', '')}"
        for err in report.get("errors", [])
        for problem in err.get("problems", [])
    ]
    return "; ".join(problems) or "compile errors"
