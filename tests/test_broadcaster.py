"""Tests for docpreview.live.broadcaster — SSE connection management."""

from __future__ import annotations

import asyncio
import json
from typing import Any
from unittest.mock import patch

import pytest

from docpreview.live.broadcaster import Broadcaster, SSEConnection, make_event

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _conn(client_id: str, maxsize: int = 0) -> SSEConnection:
    """Create a test SSEConnection."""
    return SSEConnection(client_id=client_id, queue=asyncio.Queue(maxsize=maxsize))


def _fake_event(kind: str, data: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    return kind, data


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestSSEConnection:
    """Verify SSEConnection dataclass."""

    def test_frozen(self) -> None:
        conn = _conn("c1")
        with pytest.raises(AttributeError):
            conn.client_id = "other"  # type: ignore[misc]

    def test_has_queue(self) -> None:
        assert isinstance(SSEConnection(client_id="c1").queue, asyncio.Queue)

    def test_equality_by_id(self) -> None:
        """Queue is excluded from comparison (compare=False)."""
        assert _conn("c1") == _conn("c1")


class TestMakeEvent:
    def test_named_json_event(self) -> None:
        event = make_event("diff", {"diff": None, "contentDiff": None})
        assert event.event == "diff"
        assert json.loads(event.data) == {"diff": None, "contentDiff": None}


class TestBroadcasterSubscriptions:
    """Tests for subscribe/unsubscribe."""

    def test_subscribe_and_get(self) -> None:
        b = Broadcaster()
        conn = _conn("c1")
        b.subscribe(conn)
        assert conn in b.get_subscribers()
        assert b.subscriber_count == 1

    def test_unsubscribe(self) -> None:
        b = Broadcaster()
        conn = _conn("c1")
        b.subscribe(conn)
        b.unsubscribe(conn)
        assert b.subscriber_count == 0

    def test_unsubscribe_unknown_is_noop(self) -> None:
        Broadcaster().unsubscribe(_conn("ghost"))


class TestBroadcasterPush:
    @pytest.mark.asyncio
    async def test_push_reaches_every_subscriber(self) -> None:
        b = Broadcaster()
        c1, c2 = _conn("c1"), _conn("c2")
        b.subscribe(c1)
        b.subscribe(c2)

        with patch("docpreview.live.broadcaster.make_event", _fake_event):
            count = await b.push("readme", {"readme": "# Hi"})

        assert count == 2
        assert c1.queue.get_nowait() == ("readme", {"readme": "# Hi"})
        assert c2.queue.get_nowait() == ("readme", {"readme": "# Hi"})

    @pytest.mark.asyncio
    async def test_push_without_subscribers(self) -> None:
        with patch("docpreview.live.broadcaster.make_event", _fake_event):
            assert await Broadcaster().push("docs", {}) == 0

    @pytest.mark.asyncio
    async def test_full_queue_skipped(self) -> None:
        b = Broadcaster()
        full = _conn("full", maxsize=1)
        full.queue.put_nowait("pending")
        ok = _conn("ok")
        b.subscribe(full)
        b.subscribe(ok)

        with patch("docpreview.live.broadcaster.make_event", _fake_event):
            assert await b.push("docs", {}) == 1

    def test_send_to_one_client(self) -> None:
        b = Broadcaster()
        conn = _conn("c1")
        with patch("docpreview.live.broadcaster.make_event", _fake_event):
            assert b.send(conn, "manifest", {"manifest": {}}) is True
        assert conn.queue.get_nowait() == ("manifest", {"manifest": {}})

    def test_send_to_full_queue(self) -> None:
        conn = _conn("c1", maxsize=1)
        conn.queue.put_nowait("pending")
        with patch("docpreview.live.broadcaster.make_event", _fake_event):
            assert Broadcaster().send(conn, "docs", {}) is False


class TestClientGenerator:
    @pytest.mark.asyncio
    async def test_yields_queued_events(self) -> None:
        b = Broadcaster()
        conn = _conn("c1")
        conn.queue.put_nowait("first")
        conn.queue.put_nowait("second")

        gen = b.client_generator(conn)
        assert await gen.__anext__() == "first"
        assert await gen.__anext__() == "second"
        await gen.aclose()

    @pytest.mark.asyncio
    async def test_cancellation_ends_quietly(self) -> None:
        b = Broadcaster()
        conn = _conn("c1")

        async def consume() -> list[Any]:
            return [event async for event in b.client_generator(conn)]

        task = asyncio.create_task(consume())
        await asyncio.sleep(0)
        task.cancel()
        assert await task == []
