"""Version ordering for three-component package versions."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


def parse_version(version: str) -> tuple[int, int, int] | None:
    """Parse ``"1.2.3"`` into ``(1, 2, 3)``.

    Returns None for anything that is not three dot-separated integers.

    """
    match = _VERSION_RE.match(version.strip())
    if match is None:
        return None
    major, minor, patch = match.groups()
    return int(major), int(minor), int(patch)


def is_older(version: str, other: str) -> bool:
    """True when *version* orders strictly before *other*.

    Unparseable versions never compare as older.

    """
    left = parse_version(version)
    right = parse_version(other)
    if left is None or right is None:
        return False
    return left < right


def latest_version(versions: Iterable[str]) -> str | None:
    """Return the highest version by numeric ordering, or None if none parse."""
    best: str | None = None
    best_key: tuple[int, int, int] | None = None
    for version in versions:
        key = parse_version(version)
        if key is None:
            continue
        if best_key is None or key > best_key:
            best, best_key = version, key
    return best


def version_to_constraint(version: str) -> str:
    """Pin an exact version as a compiler constraint.

    ``1.0.5`` becomes ``1.0.5 <= v < 1.0.6``.  Unparseable input is returned
    unchanged.

    """
    parsed = parse_version(version)
    if parsed is None:
        return version
    major, minor, patch = parsed
    return f"{major}.{minor}.{patch} <= v < {major}.{minor}.{patch + 1}"
