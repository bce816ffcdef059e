"""Application staging — turn an application into a documentable package.

The compiler only documents packages.  An application is staged as a
temporary package under ``elm-stuff/``: its modules are linked into the
package's ``src/``, port declarations are replaced with no-op definitions
(packages may not declare ports) and a package ``elm.json`` is written.
"""

from __future__ import annotations

import json
import os
import platform
import re
from pathlib import Path

from docpreview.compiler.manifest import (
    Manifest,
    application_package_manifest,
    exposed_modules,
    load_manifest,
)
from docpreview.console import error, progress, warning

_PORT_MODULE_RE = re.compile(r"port +module ")
_PORT_RE = re.compile(r"^port +([^ :]+)([^\n]+)$", re.MULTILINE)


def stub_ports(source: str) -> tuple[str, list[str]]:
    """Replace port declarations with definitions that do nothing.

    Incoming ports (``Sub``) become ``name = always Sub.none`` and outgoing
    ports (``Cmd``) become ``name = always Cmd.none``; the ``port`` keyword
    is dropped from the module header.

    Returns:
        The rewritten source and the names of the stubbed ports.

    """
    stubbed: list[str] = []

    def replace(match: re.Match[str]) -> str:
        name, decl = match.group(1), match.group(2)
        if name == "module":
            return "module" + decl
        if "Sub" in decl:
            stubbed.append(name)
            return f"{name}{decl}\n{name} = always Sub.none\n"
        if "Cmd" in decl:
            stubbed.append(name)
            return f"{name}{decl}\n{name} = always Cmd.none\n"
        warning(f"unmatched port declaration: {match.group(0)}")
        return match.group(0)

    return _PORT_RE.sub(replace, source), stubbed


def _link_module(source: Path, target: Path) -> None:
    if target.exists():
        return
    # Symlinks need admin rights on Windows.
    if platform.system() == "Windows":
        target.write_bytes(source.read_bytes())
    else:
        os.symlink(source, target)


def import_modules(src_dir: Path, dst_dir: Path) -> int:
    """Mirror every module of *src_dir* into *dst_dir*.

    Port modules are rewritten with stubbed ports; all other modules are
    linked.  Returns the number of modules imported.

    """
    count = 0
    for module_path in sorted(src_dir.rglob("*.elm")):
        relative = module_path.relative_to(src_dir)
        target = dst_dir / relative
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            source = module_path.read_text(encoding="utf-8")
            if _PORT_MODULE_RE.match(source):
                progress(f"stubbing {relative} ports")
                rewritten, _ = stub_ports(source)
                target.write_text(rewritten, encoding="utf-8")
            else:
                _link_module(module_path, target)
            count += 1
        except OSError as exc:
            error(f"cannot import {module_path}: {exc}")
    return count


def stage_application(manifest: Manifest, root: Path, staging_dir: Path) -> Manifest:
    """Stage *manifest*'s application in *staging_dir* as a package.

    Exposed modules declared by package manifests found one level above each
    source directory (``<src>/../elm.json``) are exposed as well.

    Returns:
        The package manifest written to ``staging_dir/elm.json``.

    """
    package = application_package_manifest(manifest)
    modules: list[str] = package["exposed-modules"]

    staged_src = staging_dir / "src"
    staged_src.mkdir(parents=True, exist_ok=True)

    for source_dir in manifest.get("source-directories", []):
        src = (root / source_dir).resolve()
        import_modules(src, staged_src)
        nested = load_manifest(src.parent / "elm.json")
        if nested is not None and nested.get("type") == "package":
            modules.extend(exposed_modules(nested.get("exposed-modules")))

    (staging_dir / "elm.json").write_text(json.dumps(package), encoding="utf-8")
    return package
