"""Hosted previews — build docs and diffs for any GitHub ref on demand.

Stateless apart from the on-disk checkouts and the shared compiler home.
Every request resolves the ref, fetches the source when needed, builds
the documentation and, for ``preview.json``, both diffs plus the pull
request link.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from docpreview._errors import CompilerError, SourceError
from docpreview.compare import build_diff_report
from docpreview.compiler.manifest import Manifest, load_manifest
from docpreview.compiler.report import summarize_report
from docpreview.console import info
from docpreview.hosted.github import GitHubClient, is_full_sha
from docpreview.hosted.source import fetch_source, restore_seed
from docpreview.registry.cache import PackageCache, cache_dir
from docpreview.registry.client import RegistryClient
from docpreview.registry.resolver import PublishedResolver
from docpreview.registry.versions import is_older

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    import httpx

    from docpreview.compiler.elm import Compiler
    from docpreview.config import PreviewConfig
    from docpreview.observability.collector import StackCollector

IMMUTABLE_CACHE = "s-maxage=31536000, immutable"
SHORT_CACHE = "s-maxage=60, stale-while-revalidate=300"


def cache_control_for(ref: str) -> str:
    """Commits never change; branches and tags are revalidated after a minute."""
    return IMMUTABLE_CACHE if is_full_sha(ref) else SHORT_CACHE


async def should_run_diff(manifest: Manifest, resolver: PublishedResolver) -> bool:
    """False for a historical commit of a package.

    The compiler diffs against the latest published release, so a commit
    whose version is behind it would show the changes in reverse.
    Applications and unpublished packages always run the diff.

    """
    if manifest.get("type") != "package":
        return True
    name = manifest.get("name")
    version = manifest.get("version")
    if not isinstance(name, str) or not isinstance(version, str):
        return True
    latest = await resolver.latest_version(name)
    if latest is None:
        return True
    return not is_older(version, latest)


class HostedPreviewer:
    """Builds previews of GitHub refs.

    HTTP clients are opened per request so the previewer can be shared by
    workers running their own event loops.

    Args:
        config: Preview configuration (work dir, seed, timeouts, URLs).
        compiler: Compiler; it is re-homed to ``config.hosted_home``.
        collector: Optional event collector.
        transport: Optional httpx transport for every client.

    """

    def __init__(
        self,
        config: PreviewConfig,
        compiler: Compiler,
        collector: StackCollector | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._compiler = compiler.with_home(config.hosted_home)
        self._collector = collector
        self._transport = transport
        self._seeded = False

    @property
    def compiler(self) -> Compiler:
        return self._compiler

    @asynccontextmanager
    async def session(self) -> AsyncIterator[tuple[GitHubClient, PublishedResolver]]:
        """Open a GitHub client and a cache-then-registry resolver."""
        config = self._config
        github = GitHubClient(
            config.github_api_url,
            config.codeload_url,
            timeout=config.http_timeout,
            transport=self._transport,
        )
        registry = RegistryClient(
            config.registry_url,
            timeout=config.http_timeout,
            transport=self._transport,
        )
        cache = PackageCache(cache_dir(config.hosted_home, self._compiler.version))
        async with github, registry:
            yield github, PublishedResolver(cache, registry)

    def _ensure_home(self) -> None:
        if self._seeded:
            return
        if restore_seed(self._config.seed_dir, self._config.hosted_home, self._compiler.version):
            info(f"restored compiler home from {self._config.seed_dir}")
        self._seeded = True

    async def checkout(
        self, github: GitHubClient, owner: str, repo: str, ref: str
    ) -> tuple[Path, Manifest]:
        """Fetch the source of *ref* and load its manifest.

        Raises:
            SourceError: If the source cannot be fetched or has no elm.json.

        """
        sha, work_dir = await fetch_source(github, owner, repo, ref, self._config.work_dir)
        info(f"resolved {owner}/{repo}@{ref} -> {sha}")
        manifest = load_manifest(work_dir / "elm.json")
        if manifest is None:
            msg = f"No elm.json found in {owner}/{repo}@{ref}"
            raise SourceError(msg)
        return work_dir, manifest

    async def build(self, work_dir: Path, manifest: Manifest) -> list[Any]:
        """Build documentation for a checkout.

        Raises:
            CompilerError: If the build produced no documentation.

        """
        self._ensure_home()
        docs = await asyncio.to_thread(
            self._compiler.build_docs,
            manifest,
            work_dir,
            timeout=self._config.build_timeout,
        )
        ok = isinstance(docs, list)
        if self._collector is not None:
            self._collector.record_build(
                str(work_dir),
                manifest.get("type", "package"),
                modules=len(docs) if ok else 0,
                ok=ok,
            )
        if not ok:
            msg = f"elm make failed: {summarize_report(docs)}"
            raise CompilerError(msg, report=docs)
        return docs

    async def docs(self, owner: str, repo: str, ref: str) -> list[Any]:
        """Documentation of *ref* (``docs.json``)."""
        async with self.session() as (github, _resolver):
            work_dir, manifest = await self.checkout(github, owner, repo, ref)
            return await self.build(work_dir, manifest)

    async def preview(self, owner: str, repo: str, ref: str) -> dict[str, Any]:
        """Full preview of *ref* (``preview.json``)."""
        async with self.session() as (github, resolver):
            work_dir, manifest = await self.checkout(github, owner, repo, ref)
            docs = await self.build(work_dir, manifest)

            readme_path = work_dir / "README.md"
            readme = readme_path.read_text(encoding="utf-8") if readme_path.is_file() else None

            run_diff, pull_request_url = await asyncio.gather(
                should_run_diff(manifest, resolver),
                github.lookup_pull_request(owner, repo, ref),
            )
            name = manifest.get("name") if manifest.get("type") == "package" else None
            report = await build_diff_report(
                self._compiler,
                work_dir,
                name,
                resolver,
                current_docs=docs,
                current_readme=readme,
                run_api_diff=run_diff,
                timeout=self._config.diff_timeout,
                collector=self._collector,
            )

        if not run_diff:
            info("diff: skipped (historical commit)")
        elif report.diff is not None:
            info(f"diff: {report.diff.magnitude.value}")
        else:
            info("diff: no changes")

        return {
            "docs": docs,
            **report.to_json(),
            "pullRequestUrl": pull_request_url,
            "readme": readme,
        }
