"""Local router — serves the project and the package cache to the web UI.

Registers the documentation API consumed by the UI:

- ``/preview``: current project manifest
- ``/search.json``: cached packages merged with the project
- ``/packages/{author}/{project}/...``: releases, docs, README, manifest
- ``/__docpreview/events``: SSE stream of live messages
- ``/__docpreview/stats``: event log summary

Requests for the project itself are answered from the working tree (docs
are rebuilt on every request); everything else comes from the cache.
"""

from __future__ import annotations

import asyncio
import uuid
from pathlib import Path
from typing import TYPE_CHECKING, Any

from docpreview.compiler.manifest import full_name, load_manifest
from docpreview.console import progress
from docpreview.web.responses import json_response, not_found, text_response
from docpreview.web.stats import register_stats_endpoint

if TYPE_CHECKING:
    from chirp import App, Request

    from docpreview.config import PreviewConfig
    from docpreview.live.broadcaster import Broadcaster
    from docpreview.live.pipeline import PreviewPipeline
    from docpreview.observability.collector import StackCollector
    from docpreview.registry.cache import PackageCache

SSE_ENDPOINT = "/__docpreview/events"

PACKAGE_UI = "/packages/{author}/{project}/"


def merge_search(cached: dict[str, dict[str, Any]], manifest: dict[str, Any] | None) -> list[dict[str, Any]]:
    """Package summaries with the project's entry overriding the cache."""
    packages = dict(cached)
    if manifest is not None and manifest.get("name") and manifest.get("version"):
        packages[manifest["name"]] = {
            "name": manifest["name"],
            "summary": manifest.get("summary", ""),
            "license": manifest.get("license", "Fair"),
            "versions": [manifest["version"]],
        }
    return list(packages.values())


def merge_releases(cached: dict[str, int], manifest: dict[str, Any] | None, name: str) -> dict[str, int]:
    """Cached releases of *name*, plus the project's version when it is *name*."""
    releases = dict(cached)
    if manifest is not None and manifest.get("name") == name and manifest.get("version"):
        releases[manifest["version"]] = manifest.get("timestamp", 0)
    return releases


class LocalRouter:
    """Registers the local preview routes on a Chirp app.

    Args:
        app: Chirp application.
        config: Preview configuration.
        pipeline: Live pipeline holding the current manifest.
        cache: Local package cache.

    """

    def __init__(
        self,
        app: App,
        config: PreviewConfig,
        pipeline: PreviewPipeline,
        cache: PackageCache,
    ) -> None:
        self._app = app
        self._config = config
        self._pipeline = pipeline
        self._cache = cache
        self._tasks: set[asyncio.Task[None]] = set()

    def _is_project(self, author: str, project: str, version: str) -> bool:
        manifest = self._pipeline.manifest
        return manifest is not None and full_name(manifest) == f"{author}/{project}/{version}"

    def register_api_routes(self) -> None:
        """Register the documentation API."""
        cache = self._cache
        config = self._config
        pipeline = self._pipeline

        async def preview(request: Request) -> Any:
            manifest = pipeline.manifest
            if manifest is None:
                return not_found("project")
            return json_response(manifest)

        async def search(request: Request) -> Any:
            return json_response(merge_search(cache.search_packages(), pipeline.manifest))

        async def releases(request: Request, author: str, project: str) -> Any:
            name = f"{author}/{project}"
            return json_response(merge_releases(cache.releases(name), pipeline.manifest, name))

        async def docs(request: Request, author: str, project: str, version: str) -> Any:
            if self._is_project(author, project, version):
                return json_response(await pipeline.build_docs())
            data = cache.read_docs(f"{author}/{project}", version)
            if data is None:
                return not_found("docs.json")
            return json_response(data)

        async def readme(request: Request, author: str, project: str, version: str) -> Any:
            if self._is_project(author, project, version):
                text = pipeline.read_readme()
            else:
                text = cache.read_readme(f"{author}/{project}", version)
            if text is None:
                return not_found("README.md")
            return text_response(text, content_type="text/markdown; charset=utf-8")

        async def manifest(request: Request, author: str, project: str, version: str) -> Any:
            if self._is_project(author, project, version):
                data = load_manifest(config.manifest_path)
            else:
                data = cache.read_manifest(f"{author}/{project}", version)
            if data is None:
                return not_found("elm.json")
            return json_response(data)

        base = "/packages/{author}/{project}"
        self._app.route("/preview", name="docpreview:preview")(preview)
        self._app.route("/search.json", name="docpreview:search")(search)
        self._app.route(f"{base}/releases.json", name="docpreview:releases")(releases)
        self._app.route(f"{base}/{{version}}/docs.json", name="docpreview:docs")(docs)
        self._app.route(f"{base}/{{version}}/README.md", name="docpreview:readme")(readme)
        self._app.route(f"{base}/{{version}}/elm.json", name="docpreview:manifest")(manifest)

    def register_sse_endpoint(self, broadcaster: Broadcaster) -> None:
        """Register the ``/__docpreview/events`` SSE endpoint.

        A new client immediately receives the current diff.

        """
        from chirp import EventStream

        from docpreview.live.broadcaster import SSEConnection

        pipeline = self._pipeline
        tasks = self._tasks

        async def sse_handler(request: Request) -> Any:
            conn = SSEConnection(client_id=str(uuid.uuid4()))
            broadcaster.subscribe(conn)
            progress(f"client {conn.client_id[:8]} connected")

            task = asyncio.create_task(pipeline.send_initial_diff(conn))
            tasks.add(task)
            task.add_done_callback(tasks.discard)

            async def generate():  # type: ignore[return]
                try:
                    async for event in broadcaster.client_generator(conn):
                        yield event
                finally:
                    broadcaster.unsubscribe(conn)
                    progress("client disconnected")

            return EventStream(generate())

        self._app.route(SSE_ENDPOINT, name="docpreview:events")(sse_handler)

    def register_stats_endpoint(self, collector: StackCollector) -> None:
        """Register the ``/__docpreview/stats`` JSON endpoint."""
        register_stats_endpoint(self._app, collector)

    def register_ui_routes(self) -> None:
        """Serve the web UI's ``index.html`` for its client-side routes."""
        static_dir = self._config.static_dir
        if static_dir is None:
            return
        index = static_dir / "index.html"

        def render_index() -> Any:
            if not index.is_file():
                return not_found("index.html")
            return text_response(
                index.read_text(encoding="utf-8"),
                content_type="text/html; charset=utf-8",
            )

        async def home(request: Request) -> Any:
            return render_index()

        async def package(request: Request, author: str, project: str) -> Any:
            return render_index()

        async def release(request: Request, author: str, project: str, version: str) -> Any:
            return render_index()

        async def module(
            request: Request, author: str, project: str, version: str, module: str
        ) -> Any:
            return render_index()

        self._app.route("/", name="docpreview:home")(home)
        self._app.route(PACKAGE_UI, name="docpreview:package")(package)
        self._app.route(f"{PACKAGE_UI}{{version}}/", name="docpreview:release")(release)
        self._app.route(f"{PACKAGE_UI}{{version}}/{{module}}", name="docpreview:module")(module)

    def mount_static_files(self) -> None:
        """Serve UI assets, the project source and the cached package sources."""
        from chirp.middleware import StaticFiles

        static_dir = self._config.static_dir
        if static_dir is not None and static_dir.is_dir():
            self._app.add_middleware(StaticFiles(directory=static_dir, prefix="/static"))

        manifest = self._pipeline.manifest
        if manifest is not None:
            self._app.add_middleware(
                StaticFiles(directory=self._config.root, prefix=f"/source/{full_name(manifest)}")
            )
        if Path(self._cache.root).is_dir():
            self._app.add_middleware(StaticFiles(directory=self._cache.root, prefix="/source"))
