"""Diff reports — the API diff and the content diff merged into one message.

Shared by the live pipeline, the ``diff`` command and hosted mode.  The
compiler diff runs in a worker thread while the published baseline is
resolved, then the content diff is computed from both snapshots.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from docpreview.diffing import ApiDiff, ContentDiff, compute_content_diff, load_snapshot

if TYPE_CHECKING:
    from pathlib import Path

    from docpreview.compiler.elm import Compiler
    from docpreview.observability.collector import StackCollector
    from docpreview.registry.resolver import PublishedBaseline, PublishedResolver


@dataclass(frozen=True, slots=True)
class DiffReport:
    """Both diffs of a project against its latest published release.

    Attributes:
        diff: Compiler API diff, or None when unavailable or skipped.
        content_diff: Content diff, or None when there is nothing to report.
        baseline: Published version compared against, if any.

    """

    diff: ApiDiff | None = None
    content_diff: ContentDiff | None = None
    baseline: str | None = None

    def to_json(self) -> dict[str, Any]:
        return {
            "diff": self.diff.to_json() if self.diff is not None else None,
            "contentDiff": (
                self.content_diff.to_json() if self.content_diff is not None else None
            ),
        }


async def _nothing() -> None:
    return None


async def build_diff_report(
    compiler: Compiler,
    root: Path,
    name: str | None,
    resolver: PublishedResolver,
    *,
    current_docs: Any,
    current_readme: str | None,
    run_api_diff: bool = True,
    timeout: float | None = None,
    collector: StackCollector | None = None,
) -> DiffReport:
    """Diff the project at *root* against the latest release of *name*.

    Args:
        compiler: Compiler used for the API diff.
        root: Project directory.
        name: Full package name (None skips the content diff).
        resolver: Source of the published baseline.
        current_docs: Decoded docs of the current build (anything that is not
            a module list disables the content diff).
        current_readme: Current README text, if any.
        run_api_diff: False skips the compiler diff (``diff`` is None).
        timeout: Seconds allowed for the compiler diff.
        collector: Optional event collector.

    """
    t0 = time.perf_counter()
    api_task = (
        asyncio.to_thread(compiler.diff, root, timeout=timeout)
        if run_api_diff
        else _nothing()
    )
    baseline_task = resolver.load_baseline(name) if name is not None else _nothing()
    api_diff, baseline = await asyncio.gather(api_task, baseline_task)
    duration_ms = (time.perf_counter() - t0) * 1000

    content_diff = content_diff_against(baseline, current_docs, current_readme)

    if collector is not None:
        if run_api_diff:
            collector.record_api_diff(str(root), api_diff, duration_ms=duration_ms)
        if name is not None:
            collector.record_content_diff(
                name, baseline.version if baseline is not None else None, content_diff
            )

    return DiffReport(
        diff=api_diff,
        content_diff=content_diff,
        baseline=baseline.version if baseline is not None else None,
    )


def content_diff_against(
    baseline: PublishedBaseline | None,
    current_docs: Any,
    current_readme: str | None,
) -> ContentDiff | None:
    """Content diff of the current snapshot against a published baseline."""
    if baseline is None:
        return None
    return compute_content_diff(
        load_snapshot(baseline.docs),
        load_snapshot(current_docs),
        baseline.readme,
        current_readme,
    )
