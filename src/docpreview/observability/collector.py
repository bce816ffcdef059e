"""Stack collector — records build, diff and live events into the event log.

Also implements Pounce's ``LifecycleCollector`` protocol (duck-typed) so the
same log receives connection events when passed to the server.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from docpreview.observability.events import (
    ApiDiffed,
    ContentDiffed,
    DocsBuilt,
    LiveMessageSent,
    now_ns,
)
from docpreview.observability.log import EventLog

if TYPE_CHECKING:
    from docpreview.diffing.api import ApiDiff
    from docpreview.diffing.content import ContentDiff


class StackCollector:
    """Unified event collector for the preview server.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Pounce LifecycleCollector protocol -----

    def record(self, event: Any) -> None:
        """Record a Pounce lifecycle event."""
        self._log.append(event)

    # ----- Build events -----

    def record_build(
        self,
        source: str,
        kind: str,
        *,
        modules: int = 0,
        ok: bool = True,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a documentation build."""
        self._log.append(
            DocsBuilt(
                source=source,
                kind=kind,  # type: ignore[arg-type]
                modules=modules,
                ok=ok,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Diff events -----

    def record_api_diff(
        self,
        source: str,
        diff: ApiDiff | None,
        *,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a compiler diff run (``diff`` None = unavailable)."""
        self._log.append(
            ApiDiffed(
                source=source,
                magnitude=diff.magnitude.value if diff is not None else None,
                added_modules=len(diff.added_modules) if diff is not None else 0,
                removed_modules=len(diff.removed_modules) if diff is not None else 0,
                changed_modules=len(diff.changed_modules) if diff is not None else 0,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_content_diff(
        self,
        package: str,
        baseline: str | None,
        diff: ContentDiff | None,
    ) -> None:
        """Record a content diff computation."""
        modules = diff.modules if diff is not None else {}
        self._log.append(
            ContentDiffed(
                package=package,
                baseline=baseline,
                modules=len(modules),
                items=sum(len(m.items) for m in modules.values()),
                readme_changed=diff is not None and diff.readme_diff is not None,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Live events -----

    def record_live_message(
        self,
        kind: str,
        *,
        clients_notified: int = 0,
        trigger_path: str = "",
    ) -> None:
        """Record a live message broadcast."""
        self._log.append(
            LiveMessageSent(
                kind=kind,
                clients_notified=clients_notified,
                trigger_path=trigger_path,
                timestamp_ns=now_ns(),
            )
        )
