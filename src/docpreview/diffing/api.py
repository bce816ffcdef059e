"""API diff parser — structured model of the compiler's ``diff`` report.

The compiler's ``diff`` subcommand prints a semi-structured text report::

    This is a MAJOR change.

    ---- ADDED MODULES - MINOR ----

        FilePath

    ---- Json.Decode - MAJOR ----

        Added:
            newFunc : String -> Int

        Changed:
          - oldFunc : Int -> String
          + oldFunc : Int -> Int -> String

        Removed:
            removedFunc : String

The parser is a single forward pass over the lines with an explicit state
variable.  Blank lines never end a section: only the next banner line
(four or more dashes) or the end of input does.  Malformed input never
raises; the worst case is a sparsely populated ``ApiDiff``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Any


class Magnitude(StrEnum):
    """Overall severity of an API change."""

    MAJOR = "MAJOR"
    MINOR = "MINOR"
    PATCH = "PATCH"


@dataclass(frozen=True, slots=True)
class ModuleChanges:
    """Symbol-level changes within one existing module.

    Attributes:
        name: Dotted module name.
        added: Newly introduced symbol names, first-seen order.
        changed: Symbols whose signature changed, deduplicated.
        removed: Dropped symbol names.

    """

    name: str
    added: tuple[str, ...] = ()
    changed: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "added": list(self.added),
            "changed": list(self.changed),
            "removed": list(self.removed),
        }


@dataclass(frozen=True, slots=True)
class ApiDiff:
    """Parsed API change report.

    Attributes:
        magnitude: Overall change magnitude announced on the first line.
        added_modules: Modules new in the current version, report order.
        removed_modules: Modules dropped from the current version.
        changed_modules: Per-module symbol changes, report order.

    """

    magnitude: Magnitude
    added_modules: tuple[str, ...] = ()
    removed_modules: tuple[str, ...] = ()
    changed_modules: tuple[ModuleChanges, ...] = ()

    def to_json(self) -> dict[str, Any]:
        return {
            "magnitude": self.magnitude.value,
            "addedModules": list(self.added_modules),
            "removedModules": list(self.removed_modules),
            "changedModules": [mc.to_json() for mc in self.changed_modules],
        }


_MAGNITUDE_RE = re.compile(r"This is a (MAJOR|MINOR|PATCH) change")
_ADDED_MODULES_RE = re.compile(r"^-+ ADDED MODULES")
_REMOVED_MODULES_RE = re.compile(r"^-+ REMOVED MODULES")
_MODULE_BANNER_RE = re.compile(r"^-{4,} (.+?) - (?:MAJOR|MINOR|PATCH) -{4,}$")
_BANNER_RE = re.compile(r"^-{4,}")
_INDENTED_RE = re.compile(r"^\s+\S")
_MARKER_RE = re.compile(r"^[+-]\s*")
_ITEM_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9_]*)\s+:")

_SUBSECTIONS = {"Added:": "added", "Changed:": "changed", "Removed:": "removed"}


class _State(Enum):
    NONE = "none"
    ADDED_MODULES = "added-modules"
    REMOVED_MODULES = "removed-modules"
    MODULE_BODY = "module-body"


class _ModuleBuilder:
    """Accumulates one module's symbol names with first-seen deduplication."""

    __slots__ = ("name", "sections")

    def __init__(self, name: str) -> None:
        self.name = name
        self.sections: dict[str, list[str]] = {"added": [], "changed": [], "removed": []}

    def record(self, section: str, item: str) -> None:
        names = self.sections[section]
        if item not in names:
            names.append(item)

    def build(self) -> ModuleChanges:
        return ModuleChanges(
            name=self.name,
            added=tuple(self.sections["added"]),
            changed=tuple(self.sections["changed"]),
            removed=tuple(self.sections["removed"]),
        )


def _item_name(line: str) -> str | None:
    """Extract ``name`` from ``[+|-] name : type``; ``None`` for other lines."""
    match = _ITEM_RE.match(_MARKER_RE.sub("", line, count=1))
    return match.group(1) if match else None


def parse_diff_output(output: str) -> ApiDiff | None:
    """Parse the stdout of a successful ``diff`` run.

    Returns ``None`` when *output* is empty or its first line is not the
    magnitude announcement.  Callers substitute ``None`` themselves when the
    diff command failed, without calling this function.

    """
    if not output:
        return None

    lines = output.split("\n")
    magnitude_match = _MAGNITUDE_RE.search(lines[0])
    if magnitude_match is None:
        return None

    added_modules: list[str] = []
    removed_modules: list[str] = []
    changed_modules: list[ModuleChanges] = []

    state = _State.NONE
    module: _ModuleBuilder | None = None
    section: str | None = None

    i = 1
    while i < len(lines):
        line = lines[i]

        if _BANNER_RE.match(line) or (state is _State.NONE and line.startswith("-")):
            # Any banner closes the open section before being classified.
            if module is not None:
                changed_modules.append(module.build())
                module = None
            section = None

            module_match = _MODULE_BANNER_RE.match(line)
            if _ADDED_MODULES_RE.match(line):
                state = _State.ADDED_MODULES
            elif _REMOVED_MODULES_RE.match(line):
                state = _State.REMOVED_MODULES
            elif module_match is not None:
                module = _ModuleBuilder(module_match.group(1))
                state = _State.MODULE_BODY
            else:
                state = _State.NONE

        elif state is _State.ADDED_MODULES:
            if _INDENTED_RE.match(line):
                added_modules.append(line.strip())

        elif state is _State.REMOVED_MODULES:
            if _INDENTED_RE.match(line):
                removed_modules.append(line.strip())

        elif state is _State.MODULE_BODY and module is not None:
            stripped = line.strip()
            if stripped in _SUBSECTIONS:
                section = _SUBSECTIONS[stripped]
            elif section is not None and stripped:
                item = _item_name(stripped)
                if item is not None:
                    module.record(section, item)

        i += 1

    if module is not None:
        changed_modules.append(module.build())

    return ApiDiff(
        magnitude=Magnitude(magnitude_match.group(1)),
        added_modules=tuple(added_modules),
        removed_modules=tuple(removed_modules),
        changed_modules=tuple(changed_modules),
    )
