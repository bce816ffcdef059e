"""``/__docpreview/stats`` — event log summary for both server modes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from docpreview.web.responses import json_response

if TYPE_CHECKING:
    from chirp import App, Request

    from docpreview.observability.collector import StackCollector

STATS_ENDPOINT = "/__docpreview/stats"


def register_stats_endpoint(app: App, collector: StackCollector) -> None:
    """Register the stats endpoint, with recent events newest first."""

    async def stats_handler(request: Request) -> Any:
        recent = [
            {"type": type(event).__name__, "timestamp_ns": event.timestamp_ns}
            for event in reversed(collector.log.recent(20))
        ]
        return json_response({"event_log": collector.log.stats(), "recent": recent})

    app.route(STATS_ENDPOINT, name="docpreview:stats")(stats_handler)
