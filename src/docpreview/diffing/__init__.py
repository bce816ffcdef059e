"""Diff engines — API change reports and documentation content diffs.

Pure, synchronous functions: they perform no I/O, never raise on odd input,
and signal "nothing to report" with ``None``.
"""

from docpreview.diffing.api import ApiDiff, Magnitude, ModuleChanges, parse_diff_output
from docpreview.diffing.content import (
    ContentDiff,
    ItemContentDiff,
    ModuleContentDiff,
    compute_content_diff,
)
from docpreview.diffing.docs import DocumentedModule, Snapshot, load_snapshot
from docpreview.diffing.lines import DiffLine, DiffStatus, compute_line_diff

__all__ = [
    "ApiDiff",
    "ContentDiff",
    "DiffLine",
    "DiffStatus",
    "DocumentedModule",
    "ItemContentDiff",
    "Magnitude",
    "ModuleChanges",
    "ModuleContentDiff",
    "Snapshot",
    "compute_content_diff",
    "compute_line_diff",
    "load_snapshot",
    "parse_diff_output",
]
