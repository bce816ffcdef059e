"""Event log — the bounded store behind ``/__docpreview/stats``.

The watcher thread, the pipeline task and request handlers all append here,
so every access goes through one lock.
"""

import threading
from collections import Counter, deque
from typing import Any

from docpreview.observability.events import PreviewEvent


class EventLog:
    """Keep the last *max_events* preview events, oldest dropped first."""

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 10_000) -> None:
        self._max_events = max_events
        self._events: deque[PreviewEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def append(self, event: PreviewEvent) -> None:
        with self._lock:
            self._events.append(event)

    def recent(self, n: int = 20) -> list[PreviewEvent]:
        """The last *n* events in the order they were recorded."""
        with self._lock:
            snapshot = list(self._events)
        return snapshot[-n:] if n > 0 else []

    def clear(self) -> int:
        """Drop every event; returns how many were dropped."""
        with self._lock:
            dropped = len(self._events)
            self._events.clear()
        return dropped

    def stats(self) -> dict[str, Any]:
        """Totals for the stats endpoint, with a count per event class."""
        with self._lock:
            counts = Counter(type(event).__name__ for event in self._events)
            total = len(self._events)
        return {
            "total": total,
            "max_events": self._max_events,
            "by_type": dict(counts),
        }
