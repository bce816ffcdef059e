"""SSE broadcaster — pushes live messages to connected browsers.

Every message is an SSE event named after its kind (``readme``,
``manifest``, ``docs``, ``diff`` or ``error``) with a JSON ``data`` payload.
"""

from __future__ import annotations

import asyncio
import json
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from docpreview._types import ClientID, MessageKind


@dataclass(frozen=True, slots=True)
class SSEConnection:
    """A connected SSE client.

    Attributes:
        client_id: Unique identifier for this connection.
        queue: asyncio.Queue[Any] for pushing events to the client's generator.

    """

    client_id: ClientID
    queue: asyncio.Queue[Any] = field(default_factory=asyncio.Queue, compare=False, hash=False)


def make_event(kind: MessageKind, data: dict[str, Any]) -> Any:
    """Build a Chirp ``SSEEvent`` carrying *data* as JSON."""
    from chirp import SSEEvent

    return SSEEvent(data=json.dumps(data), event=kind)


class Broadcaster:
    """Manages SSE connections and fans messages out to all of them.

    Thread-safe: the subscriber set is protected by a lock.

    """

    def __init__(self) -> None:
        self._subscribers: set[SSEConnection] = set()
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        """Number of active SSE connections."""
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, conn: SSEConnection) -> None:
        with self._lock:
            self._subscribers.add(conn)

    def unsubscribe(self, conn: SSEConnection) -> None:
        with self._lock:
            self._subscribers.discard(conn)

    def get_subscribers(self) -> frozenset[SSEConnection]:
        """Snapshot of the current subscribers (no lock held on return)."""
        with self._lock:
            return frozenset(self._subscribers)

    def send(self, conn: SSEConnection, kind: MessageKind, data: dict[str, Any]) -> bool:
        """Enqueue a message for one client.  False if its queue is full."""
        try:
            conn.queue.put_nowait(make_event(kind, data))
        except asyncio.QueueFull:
            return False
        return True

    async def push(self, kind: MessageKind, data: dict[str, Any]) -> int:
        """Push a message to every subscriber.

        Returns:
            Number of clients the message was enqueued for.

        """
        event = make_event(kind, data)
        count = 0
        for conn in self.get_subscribers():
            try:
                conn.queue.put_nowait(event)
                count += 1
            except asyncio.QueueFull:
                continue
        return count

    async def client_generator(self, conn: SSEConnection) -> AsyncIterator[Any]:
        """Async generator that yields events from a connection's queue.

        Used as the generator for Chirp's ``EventStream``.  Stops quietly on
        client disconnect (``CancelledError``) and generator cleanup.

        """
        try:
            while True:
                event = await conn.queue.get()
                yield event
        except (asyncio.CancelledError, GeneratorExit):
            return
