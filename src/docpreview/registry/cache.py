"""Local package cache — the compiler's on-disk store of downloaded packages.

Layout: ``<home>/<compiler-version>/packages/<author>/<project>/<version>/``
holding ``elm.json``, ``docs.json`` and ``README.md``.  Compiler 0.19.0 names
the directory ``package`` instead of ``packages``.

All read operations return None (or an empty collection) when a file is
missing or unreadable; the cache is an optimisation, never a requirement.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from docpreview.console import warning
from docpreview.registry.versions import latest_version, parse_version


def cache_dir(home: Path, compiler_version: str) -> Path:
    """Resolve the package directory inside a compiler home."""
    packages = "package" if compiler_version == "0.19.0" else "packages"
    return home / compiler_version / packages


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        return None


class PackageCache:
    """Read-only view over the compiler's package cache.

    Args:
        root: The packages directory (see ``cache_dir``).

    """

    __slots__ = ("_root",)

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def package_dir(self, name: str, version: str) -> Path:
        return self._root / name / version

    def versions(self, name: str) -> list[str]:
        """Cached versions of a package, unordered."""
        package_root = self._root / name
        if not package_root.is_dir():
            return []
        return [
            entry.name
            for entry in package_root.iterdir()
            if entry.is_dir() and parse_version(entry.name) is not None
        ]

    def latest_version(self, name: str) -> str | None:
        return latest_version(self.versions(name))

    def read_docs(self, name: str, version: str) -> Any:
        """Decoded ``docs.json`` of a cached release, or None."""
        return _read_json(self.package_dir(name, version) / "docs.json")

    def read_readme(self, name: str, version: str) -> str | None:
        return _read_text(self.package_dir(name, version) / "README.md")

    def read_manifest(self, name: str, version: str) -> Any:
        return _read_json(self.package_dir(name, version) / "elm.json")

    def releases(self, name: str) -> dict[str, int]:
        """Map cached versions of a package to their manifest mtime (seconds)."""
        result: dict[str, int] = {}
        for version in self.versions(name):
            manifest = self.package_dir(name, version) / "elm.json"
            try:
                result[version] = round(manifest.stat().st_mtime)
            except OSError:
                continue
        return result

    def search_packages(self) -> dict[str, dict[str, Any]]:
        """Summaries of every cached package, keyed by name.

        Each entry holds ``name``, ``summary``, ``license`` and ``versions``;
        versions of the same package are merged into one entry.

        """
        packages: dict[str, dict[str, Any]] = {}
        if not self._root.is_dir():
            return packages

        for manifest_path in sorted(self._root.glob("*/*/*/elm.json")):
            manifest = _read_json(manifest_path)
            if not isinstance(manifest, dict):
                continue
            name = manifest.get("name")
            version = manifest.get("version")
            if not name or not version:
                warning(f"invalid elm.json: {manifest_path}")
                continue
            entry = packages.get(name)
            if entry is None:
                packages[name] = {
                    "name": name,
                    "summary": manifest.get("summary", ""),
                    "license": manifest.get("license", "Fair"),
                    "versions": [version],
                }
            else:
                entry["versions"].append(version)
        return packages
