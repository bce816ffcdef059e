"""Line diff — classified line-level diff between two text blobs.

Shared leaf of both diff engines.  Texts are split on ``\\n`` only, each line
keeping its terminator, and compared with ``difflib.SequenceMatcher``.  Every
block the matcher reports is expanded into one ``DiffLine`` per line, in
document order, with no grouping into hunks.
"""

from __future__ import annotations

import difflib
import re
from dataclasses import dataclass
from enum import IntEnum

# A line with its "\n" terminator, or a trailing line without one
_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")


class DiffStatus(IntEnum):
    """Classification of a single diff line (wire values -1, 0, 1)."""

    REMOVED = -1
    CONTEXT = 0
    ADDED = 1


@dataclass(frozen=True, slots=True)
class DiffLine:
    """One line of a line diff.

    Attributes:
        status: Whether the line is unchanged, added, or removed.
        text: The line content without its trailing newline.

    """

    status: DiffStatus
    text: str

    def to_json(self) -> list[int | str]:
        """Encode as the ``[status, text]`` pair the web UI expects."""
        return [int(self.status), self.text]


def _split_lines(text: str) -> list[str]:
    return _LINE_RE.findall(text)


def _expand(status: DiffStatus, lines: list[str]) -> list[DiffLine]:
    # Drop exactly one trailing "\n" per line so a final newline never
    # contributes an extra empty line.
    return [
        DiffLine(status, line[:-1] if line.endswith("\n") else line)
        for line in lines
    ]


def compute_line_diff(old_text: str, new_text: str) -> tuple[DiffLine, ...] | None:
    """Diff two texts line by line.

    Returns ``None`` (not an empty tuple) when every block is unchanged, so
    callers can use absence as the "no diff" signal.  A replaced block is
    emitted as its removed lines followed by its added lines.

    """
    old_lines = _split_lines(old_text)
    new_lines = _split_lines(new_text)

    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    opcodes = matcher.get_opcodes()
    if all(tag == "equal" for tag, *_ in opcodes):
        return None

    result: list[DiffLine] = []
    for tag, i1, i2, j1, j2 in opcodes:
        if tag == "equal":
            result.extend(_expand(DiffStatus.CONTEXT, old_lines[i1:i2]))
        elif tag == "delete":
            result.extend(_expand(DiffStatus.REMOVED, old_lines[i1:i2]))
        elif tag == "insert":
            result.extend(_expand(DiffStatus.ADDED, new_lines[j1:j2]))
        else:
            result.extend(_expand(DiffStatus.REMOVED, old_lines[i1:i2]))
            result.extend(_expand(DiffStatus.ADDED, new_lines[j1:j2]))
    return tuple(result)


def line_diff_to_json(lines: tuple[DiffLine, ...] | None) -> list[list[int | str]] | None:
    """Encode an optional line diff, keeping ``None`` as ``None``."""
    if lines is None:
        return None
    return [line.to_json() for line in lines]
