"""Observability — a unified event model for builds, diffs and live updates.

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production from the watcher thread and request handlers.

Quick Start:
    >>> from docpreview.observability import StackCollector, EventLog
    >>> log = EventLog()
    >>> collector = StackCollector(log)
    >>> collector.record_live_message("diff", clients_notified=2)

"""

from docpreview.observability.collector import StackCollector
from docpreview.observability.events import (
    ApiDiffed,
    ContentDiffed,
    DocsBuilt,
    LiveMessageSent,
    PreviewEvent,
    now_ns,
)
from docpreview.observability.log import EventLog

__all__ = [
    "ApiDiffed",
    "ContentDiffed",
    "DocsBuilt",
    "EventLog",
    "LiveMessageSent",
    "PreviewEvent",
    "StackCollector",
    "now_ns",
]
