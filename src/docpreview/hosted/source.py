"""Source checkouts and the seeded compiler home for hosted mode.

Checkouts live in ``<work_dir>/elm-docs-<sha>`` and are reused across
requests: a commit's source never changes.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from docpreview.hosted.github import extract_tarball, is_full_sha

if TYPE_CHECKING:
    from docpreview.hosted.github import GitHubClient


def checkout_dir(work_dir: Path, sha: str) -> Path:
    return work_dir / f"elm-docs-{sha}"


async def fetch_source(
    github: GitHubClient,
    owner: str,
    repo: str,
    ref: str,
    work_dir: Path,
) -> tuple[str, Path]:
    """Make the source of *ref* available on disk.

    A full SHA with an existing checkout needs no network at all.  Otherwise
    ref resolution and the tarball download run concurrently.

    Returns:
        The commit SHA and the checkout directory.

    Raises:
        SourceError: If the ref cannot be resolved or downloaded.

    """
    if is_full_sha(ref):
        existing = checkout_dir(work_dir, ref)
        if (existing / "elm.json").exists():
            return ref, existing

    async def _sha() -> str:
        if is_full_sha(ref):
            return ref
        return await github.resolve_ref(owner, repo, ref)

    sha, data = await asyncio.gather(_sha(), github.download_tarball(owner, repo, ref))

    target = checkout_dir(work_dir, sha)
    if (target / "elm.json").exists():
        return sha, target

    await asyncio.to_thread(extract_tarball, data, target)
    return sha, target


def restore_seed(seed_dir: Path | None, home: Path, compiler_version: str = "0.19.1") -> bool:
    """Copy a pre-populated compiler home into *home*.

    Skipped when *home* already holds a package registry or no seed exists.
    Returns True when the seed was copied.

    """
    home.mkdir(parents=True, exist_ok=True)
    if (home / compiler_version / "packages" / "registry.dat").exists():
        return False
    if seed_dir is None or not seed_dir.is_dir():
        return False
    shutil.copytree(seed_dir, home, dirs_exist_ok=True)
    return True
