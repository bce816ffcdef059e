"""Project manifests — ``elm.json`` loading and application completion.

Applications have no name, version or summary of their own.  They are
completed from an optional ``elm-application.json`` next to ``elm.json``
and then from fixed defaults, so the rest of the system can treat every
project like a package.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from docpreview.console import error
from docpreview.registry.versions import version_to_constraint

APPLICATION_DEFAULTS: dict[str, str] = {
    "name": "my/application",
    "version": "1.0.0",
    "summary": "Elm application",
    "license": "Fair",
}

type Manifest = dict[str, Any]


def complete_application(manifest_path: Path, manifest: Manifest) -> Manifest:
    """Fill in package-like metadata for an application manifest.

    Package manifests are returned unchanged.

    """
    if manifest.get("type") != "application":
        return manifest

    extra_path = manifest_path.parent / "elm-application.json"
    if extra_path.is_file():
        try:
            extra = json.loads(extra_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            error(f"cannot read {extra_path}: {exc}")
        else:
            if isinstance(extra, dict):
                manifest.update(extra)

    for key, value in APPLICATION_DEFAULTS.items():
        manifest.setdefault(key, value)
    return manifest


def load_manifest(manifest_path: Path) -> Manifest | None:
    """Read a manifest, stamp it with its mtime and complete applications.

    The ``timestamp`` key holds the file's modification time in whole
    seconds.  Returns None when the file is missing or not a JSON object.

    """
    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        mtime = manifest_path.stat().st_mtime
    except (OSError, ValueError):
        return None
    if not isinstance(manifest, dict):
        return None
    manifest["timestamp"] = round(mtime)
    return complete_application(manifest_path, manifest)


def full_name(manifest: Manifest) -> str:
    """``author/project/version`` of a (completed) manifest."""
    return f"{manifest.get('name')}/{manifest.get('version')}"


def exposed_modules(value: Any) -> list[str]:
    """Flatten ``exposed-modules``, which may be a list or a categorised dict."""
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        modules: list[str] = []
        for group in value.values():
            modules.extend(group)
        return modules
    return []


def application_package_manifest(manifest: Manifest) -> Manifest:
    """Synthesise a package manifest from a completed application manifest.

    Dependencies are pinned to their exact application versions.

    """
    direct = manifest.get("dependencies", {}).get("direct", {}) or {}
    return {
        "type": "package",
        "name": manifest.get("name"),
        "summary": manifest.get("summary"),
        "license": manifest.get("license"),
        "version": manifest.get("version"),
        "exposed-modules": exposed_modules(manifest.get("exposed-modules")),
        "elm-version": version_to_constraint(manifest.get("elm-version", "")),
        "dependencies": {
            name: version_to_constraint(version) for name, version in direct.items()
        },
        "test-dependencies": {},
        "timestamp": manifest.get("timestamp"),
    }
