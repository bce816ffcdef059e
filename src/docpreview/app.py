"""docpreview application — local preview server, builds, diffs, hosted mode.

The four public functions (dev, make, diff, serve) are the primary entry
points.
"""

from __future__ import annotations

import asyncio
import json
import sys
import time
import webbrowser
from pathlib import Path
from typing import TYPE_CHECKING, Any

from docpreview._errors import CompilerError
from docpreview.compiler.elm import Compiler
from docpreview.compiler.manifest import load_manifest
from docpreview.config import PreviewConfig
from docpreview.config_loader import load_config
from docpreview.console import info, progress
from docpreview.registry.cache import PackageCache, cache_dir
from docpreview.registry.client import RegistryClient
from docpreview.registry.resolver import PublishedResolver

if TYPE_CHECKING:
    from chirp import App

    from docpreview.live.pipeline import PreviewPipeline
    from docpreview.observability.collector import StackCollector


def _create_chirp_app(config: PreviewConfig, *, debug: bool = False) -> App:
    """Create a Chirp App bound to the configured address."""
    from chirp import App, AppConfig

    app_config = AppConfig(
        template_dir=config.static_dir or config.root,
        debug=debug,
        host=config.address,
        port=config.port,
    )
    return App(config=app_config)


def _create_collector() -> StackCollector:
    from docpreview.observability import EventLog, StackCollector

    return StackCollector(EventLog())


def _local_cache(config: PreviewConfig, compiler: Compiler) -> PackageCache:
    return PackageCache(cache_dir(config.compiler_home, compiler.version))


def _start_watcher(pipeline: PreviewPipeline, app: App, root: Path) -> None:
    """Wire the ProjectWatcher to the pipeline via Chirp lifecycle hooks.

    Flow:
        on_startup  → start watcher thread, spawn the consumer task
        file change → async iteration → pipeline.handle_change()
        on_shutdown → stop watcher, cancel consumer task

    """
    from docpreview.live.watcher import ProjectWatcher

    watcher = ProjectWatcher(root, pipeline.source_dirs())
    _task: asyncio.Task[None] | None = None

    @app.on_startup
    async def _start_event_consumer() -> None:
        nonlocal _task
        watcher.start()
        kind = (pipeline.manifest or {}).get("type", "project")
        progress(f"watching {kind}")

        async def _consume_events() -> None:
            async for event in watcher.changes():
                try:
                    await pipeline.handle_change(event)
                except Exception as exc:
                    print(f"  Pipeline error: {exc}", file=sys.stderr)

        _task = asyncio.create_task(_consume_events())

    @app.on_shutdown
    async def _stop_event_consumer() -> None:
        watcher.stop()
        if _task is not None and not _task.done():
            _task.cancel()


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def dev(root: str | Path = ".", **kwargs: object) -> None:
    """Start the local documentation preview server.

    Serves the project's docs, README and manifest next to the package
    cache, watches the project and pushes live updates over SSE.

    Args:
        root: Project directory (or a file inside it).
        **kwargs: Override PreviewConfig fields.

    """
    from docpreview.banner import browse_url, print_banner
    from docpreview.live.broadcaster import Broadcaster
    from docpreview.live.pipeline import PreviewPipeline
    from docpreview.web.local import LocalRouter

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()

    compiler = Compiler.discover(config.compiler)
    cache = _local_cache(config, compiler)
    client = RegistryClient(config.registry_url, timeout=config.http_timeout)
    resolver = PublishedResolver(cache, client)
    collector = _create_collector()
    broadcaster = Broadcaster()
    pipeline = PreviewPipeline(config, compiler, resolver, broadcaster, collector)

    app = _create_chirp_app(config, debug=config.debug)
    router = LocalRouter(app, config, pipeline, cache)
    router.register_api_routes()
    router.register_sse_endpoint(broadcaster)
    router.register_stats_endpoint(collector)
    router.register_ui_routes()
    router.mount_static_files()

    if pipeline.manifest is not None and config.reload:
        _start_watcher(pipeline, app, config.root)

    url = browse_url(config, pipeline.manifest)

    @app.on_startup
    async def _open_browser() -> None:
        if config.browser:
            await asyncio.to_thread(webbrowser.open, url)

    @app.on_shutdown
    async def _close_client() -> None:
        await client.aclose()

    load_ms = (time.perf_counter() - t0) * 1000
    print_banner(
        config, "dev",
        compiler_version=compiler.version,
        manifest=pipeline.manifest,
        load_ms=load_ms,
    )

    app.run(host=config.address, port=config.port, lifecycle_collector=collector)


def make(output: str | Path, root: str | Path = ".", **kwargs: object) -> int:
    """Build the project's documentation and write it to *output*.

    ``/dev/null`` only checks that the documentation builds.

    Returns:
        0 on success.

    Raises:
        CompilerError: If there is no project or the build failed.

    """
    config = load_config(Path(root), **kwargs)
    compiler = Compiler.discover(config.compiler)
    manifest = load_manifest(config.manifest_path)
    if manifest is None:
        msg = f"no elm.json found in {config.root}"
        raise CompilerError(msg)

    docs = compiler.build_docs(
        manifest,
        config.root,
        keep=config.debug,
        verbose=True,
        timeout=config.build_timeout,
    )
    progress(f"writing documentation into {output}")
    if not isinstance(docs, list) or not docs:
        msg = "failed to build project documentation"
        raise CompilerError(msg, report=docs)

    if str(output) != "/dev/null":
        Path(output).write_text(json.dumps(docs), encoding="utf-8")
    return 0


async def _diff_report(config: PreviewConfig, compiler: Compiler) -> dict[str, Any]:
    from docpreview.compare import build_diff_report

    manifest = load_manifest(config.manifest_path)
    if manifest is None:
        msg = f"no elm.json found in {config.root}"
        raise CompilerError(msg)

    docs = await asyncio.to_thread(
        compiler.build_docs, manifest, config.root, timeout=config.build_timeout
    )
    readme = config.readme_path.read_text(encoding="utf-8") if config.readme_path.is_file() else None
    name = manifest.get("name") if manifest.get("type") == "package" else None

    async with RegistryClient(config.registry_url, timeout=config.http_timeout) as client:
        resolver = PublishedResolver(_local_cache(config, compiler), client)
        report = await build_diff_report(
            compiler,
            config.root,
            name,
            resolver,
            current_docs=docs,
            current_readme=readme,
            timeout=config.diff_timeout,
        )
    if report.baseline is not None:
        info(f"compared against {name} {report.baseline}")
    return report.to_json()


def diff(root: str | Path = ".", **kwargs: object) -> dict[str, Any]:
    """Compute ``{diff, contentDiff}`` for the project.

    Args:
        root: Project directory.
        **kwargs: Override PreviewConfig fields.

    """
    config = load_config(Path(root), **kwargs)
    compiler = Compiler.discover(config.compiler)
    return asyncio.run(_diff_report(config, compiler))


def serve(root: str | Path = ".", **kwargs: object) -> None:
    """Run hosted mode: on-demand previews of GitHub refs.

    Multiple Pounce workers share the frozen Chirp app; each request opens
    its own HTTP clients and only shares the on-disk checkouts.

    Args:
        root: Directory holding the configuration file.
        **kwargs: Override PreviewConfig fields.

    """
    from docpreview.banner import print_banner
    from docpreview.hosted.preview import HostedPreviewer
    from docpreview.web.hosted import HostedRouter
    from docpreview.web.stats import register_stats_endpoint

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()

    compiler = Compiler.discover(config.compiler)
    collector = _create_collector()
    previewer = HostedPreviewer(config, compiler, collector)

    app = _create_chirp_app(config, debug=False)
    HostedRouter(app, previewer).register_routes()

    register_stats_endpoint(app, collector)

    load_ms = (time.perf_counter() - t0) * 1000
    print_banner(config, "serve", compiler_version=compiler.version, load_ms=load_ms)

    from pounce.config import ServerConfig
    from pounce.server import Server

    server_config = ServerConfig(
        host=config.address,
        port=config.port,
        workers=config.workers,  # 0 = auto-detect via Pounce
    )
    server = Server(server_config, app, lifecycle_collector=collector)
    server.run()
