"""Live pipeline — rebuilds and pushes documentation on project changes.

Holds the current manifest and turns watcher events into live messages:

    1. ProjectWatcher detects a change (ChangeEvent)
    2. README -> ``readme`` message
       manifest -> reload, ``manifest`` and ``docs`` messages
       module -> ``docs`` message
    3. Every change ends with a ``diff`` message for packages

Failures inside a step are reported to browsers as an ``error`` message
and never stop the pipeline.
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from docpreview._errors import DocPreviewError
from docpreview.compare import build_diff_report
from docpreview.compiler.manifest import Manifest, load_manifest
from docpreview.console import error, progress

if TYPE_CHECKING:
    from docpreview.compiler.elm import Compiler
    from docpreview.config import PreviewConfig
    from docpreview.live.broadcaster import Broadcaster, SSEConnection
    from docpreview.live.watcher import ChangeEvent
    from docpreview.observability.collector import StackCollector
    from docpreview.registry.resolver import PublishedResolver
    from docpreview._types import MessageKind


class PreviewPipeline:
    """Coordinates change propagation from file edit to browser update.

    Args:
        config: Preview configuration.
        compiler: Compiler used for builds and diffs.
        resolver: Source of published releases for diffs.
        broadcaster: SSE broadcaster for pushing messages to clients.
        collector: Optional event collector.

    """

    def __init__(
        self,
        config: PreviewConfig,
        compiler: Compiler,
        resolver: PublishedResolver,
        broadcaster: Broadcaster,
        collector: StackCollector | None = None,
    ) -> None:
        self._config = config
        self._compiler = compiler
        self._resolver = resolver
        self._broadcaster = broadcaster
        self._collector = collector
        self._manifest: Manifest | None = load_manifest(config.manifest_path)
        # One rebuild at a time; overlapping changes queue behind it.
        self._lock = asyncio.Lock()

    @property
    def manifest(self) -> Manifest | None:
        return self._manifest

    def reload_manifest(self) -> Manifest | None:
        self._manifest = load_manifest(self._config.manifest_path)
        return self._manifest

    def source_dirs(self) -> list[Path]:
        """Absolute source directories of the current manifest."""
        if self._manifest is None:
            return []
        dirs = self._manifest.get("source-directories") or ["src"]
        return [(self._config.root / d).resolve() for d in dirs]

    def message_data(self, **extra: Any) -> dict[str, Any] | None:
        """Common message payload, or None without a valid package name."""
        if self._manifest is None:
            return None
        name = self._manifest.get("name")
        if not isinstance(name, str) or "/" not in name:
            return None
        author, project = name.split("/", 1)
        return {
            "author": author,
            "project": project,
            "version": self._manifest.get("version"),
            **extra,
        }

    def read_readme(self) -> str | None:
        try:
            return self._config.readme_path.read_text(encoding="utf-8")
        except OSError:
            return None

    # ----- Builds -----

    async def build_docs(self) -> Any:
        """Build current documentation in a worker thread."""
        if self._manifest is None:
            return {}
        t0 = time.perf_counter()
        docs = await asyncio.to_thread(
            self._compiler.build_docs,
            self._manifest,
            self._config.root,
            keep=self._config.debug,
            verbose=self._config.debug,
            timeout=self._config.build_timeout,
        )
        if self._collector is not None:
            ok = isinstance(docs, list)
            self._collector.record_build(
                str(self._config.root),
                self._manifest.get("type", "package"),
                modules=len(docs) if ok else 0,
                ok=ok,
                duration_ms=(time.perf_counter() - t0) * 1000,
            )
        return docs

    # ----- Messages -----

    async def _broadcast(
        self,
        kind: MessageKind,
        data: dict[str, Any],
        trigger: str,
        conn: SSEConnection | None = None,
    ) -> int:
        progress(f"sending {kind}")
        if conn is not None:
            count = int(self._broadcaster.send(conn, kind, data))
        else:
            count = await self._broadcaster.push(kind, data)
        if self._collector is not None:
            self._collector.record_live_message(
                kind, clients_notified=count, trigger_path=trigger
            )
        return count

    async def send_readme(self, trigger: str = "") -> None:
        readme = self.read_readme()
        if readme is None:
            error(f"cannot read {self._config.readme_path}")
            return
        data = self.message_data(readme=readme)
        if data is not None:
            await self._broadcast("readme", data, trigger)

    async def send_manifest(self, trigger: str = "") -> None:
        data = self.message_data(manifest=self._manifest)
        if data is not None:
            await self._broadcast("manifest", data, trigger)

    async def send_docs(self, trigger: str = "") -> None:
        if self.message_data() is None:
            return
        docs = await self.build_docs()
        data = self.message_data(time=self._manifest.get("timestamp"), docs=docs)  # type: ignore[union-attr]
        if data is not None:
            await self._broadcast("docs", data, trigger)

    async def diff_payload(self) -> dict[str, Any] | None:
        """``{diff, contentDiff}`` for a package, None for anything else."""
        if self._manifest is None or self._manifest.get("type") != "package":
            return None
        if self.message_data() is None:
            return None
        progress("running elm diff")
        current_docs = await self.build_docs()
        report = await build_diff_report(
            self._compiler,
            self._config.root,
            self._manifest["name"],
            self._resolver,
            current_docs=current_docs,
            current_readme=self.read_readme(),
            timeout=self._config.diff_timeout,
            collector=self._collector,
        )
        if report.baseline is None:
            progress("no published version found for content diff")
        return report.to_json()

    async def send_diff(self, trigger: str = "", conn: SSEConnection | None = None) -> None:
        """Send the diff to every client, or only to *conn* when given."""
        payload = await self.diff_payload()
        if payload is None:
            return
        data = self.message_data(**payload)
        if data is not None:
            await self._broadcast("diff", data, trigger, conn)

    # ----- Change handling -----

    async def handle_change(self, event: ChangeEvent) -> None:
        """Route a file change to the matching messages."""
        trigger = str(event.path)
        progress(f"detected {event.path.name} modification")
        async with self._lock:
            try:
                if event.category == "readme":
                    await self.send_readme(trigger)
                elif event.category == "manifest":
                    self.reload_manifest()
                    await self.send_manifest(trigger)
                    await self.send_docs(trigger)
                else:
                    await self.send_docs(trigger)
                await self.send_diff(trigger)
            except DocPreviewError as exc:
                error(str(exc))
                await self._broadcast("error", {"message": str(exc)}, trigger)

    async def send_initial_diff(self, conn: SSEConnection) -> None:
        """Send the current diff to a newly connected client.

        Waits for any rebuild in progress so builds never overlap in
        ``elm-stuff/``.

        """
        async with self._lock:
            try:
                await self.send_diff(conn=conn)
            except DocPreviewError as exc:
                error(str(exc))
                await self._broadcast("error", {"message": str(exc)}, "", conn)
