"""Hosted router — ``docs.json`` and ``preview.json`` for GitHub refs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from docpreview._errors import DocPreviewError
from docpreview.console import error, info
from docpreview.hosted.preview import cache_control_for
from docpreview.web.responses import error_response, json_response

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from chirp import App, Request

    from docpreview.hosted.preview import HostedPreviewer

BASE = "/repos/{owner}/{repo}/{ref}"


async def answer(
    build: Callable[[], Awaitable[Any]],
    ref: str,
) -> Any:
    """Run *build* and turn its result into a cacheable JSON response.

    Orchestration errors become HTTP 500 ``{"error": message}`` responses
    without cache headers.

    """
    try:
        payload = await build()
    except DocPreviewError as exc:
        error(f"Error: {exc}")
        return error_response(str(exc), status=500)
    return json_response(payload).with_header("Cache-Control", cache_control_for(ref))


class HostedRouter:
    """Registers the hosted-mode routes on a Chirp app."""

    def __init__(self, app: App, previewer: HostedPreviewer) -> None:
        self._app = app
        self._previewer = previewer

    def register_routes(self) -> None:
        previewer = self._previewer

        async def docs(request: Request, owner: str, repo: str, ref: str) -> Any:
            info(f"Building docs for {owner}/{repo}@{ref}")
            return await answer(lambda: previewer.docs(owner, repo, ref), ref)

        async def preview(request: Request, owner: str, repo: str, ref: str) -> Any:
            info(f"Building preview for {owner}/{repo}@{ref}")
            return await answer(lambda: previewer.preview(owner, repo, ref), ref)

        self._app.route(f"{BASE}/docs.json", name="docpreview:hosted-docs")(docs)
        self._app.route(f"{BASE}/preview.json", name="docpreview:hosted-preview")(preview)
