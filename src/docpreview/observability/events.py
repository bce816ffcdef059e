"""Event model for preview observability.

Defines event types for the build pipeline, the diff engines and the live
update channel.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Build events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DocsBuilt:
    """A documentation build finished.

    Attributes:
        source: Project directory that was built.
        kind: Project type from elm.json.
        modules: Number of documented modules (0 when the build failed).
        ok: True when the build produced a documentation snapshot.
        duration_ms: Time spent in the compiler in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    kind: Literal["package", "application"]
    modules: int
    ok: bool
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Diff events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ApiDiffed:
    """The compiler diff ran and its report was parsed.

    Attributes:
        source: Project directory.
        magnitude: Reported magnitude, or None when no diff was available.
        added_modules: Number of added modules.
        removed_modules: Number of removed modules.
        changed_modules: Number of modules with symbol changes.
        duration_ms: Time spent running the diff in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    magnitude: str | None
    added_modules: int
    removed_modules: int
    changed_modules: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ContentDiffed:
    """A content diff against the published release was computed.

    Attributes:
        package: Full package name.
        baseline: Published version diffed against, or None if never published.
        modules: Number of modules with changed entities.
        items: Total number of changed entities.
        readme_changed: True when the README produced a diff.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    package: str
    baseline: str | None
    modules: int
    items: int
    readme_changed: bool
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Live update events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LiveMessageSent:
    """A live message was pushed to connected browsers.

    Attributes:
        kind: Message name (docs, diff, readme, manifest, error).
        clients_notified: Number of SSE clients that received it.
        trigger_path: File change that caused it ("" for a new connection).
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: str
    clients_notified: int
    trigger_path: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type PreviewEvent = DocsBuilt | ApiDiffed | ContentDiffed | LiveMessageSent


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
