"""GitHub access for hosted mode — ref resolution, tarballs, pull requests.

Uses one ``httpx.AsyncClient`` per ``GitHubClient``.  Ref resolution and
tarball downloads raise ``SourceError``; pull request lookup is best effort
and returns None on any failure.
"""

from __future__ import annotations

import io
import re
import tarfile
from pathlib import Path

import httpx

from docpreview._errors import SourceError
from docpreview.registry.client import USER_AGENT

FULL_SHA_RE = re.compile(r"^[0-9a-f]{40}$", re.IGNORECASE)

_API_HEADERS = {
    "Accept": "application/vnd.github.v3+json",
    "User-Agent": USER_AGENT,
}


def is_full_sha(ref: str) -> bool:
    """True when *ref* is a full 40-character hex commit SHA."""
    return FULL_SHA_RE.match(ref) is not None


def extract_tarball(data: bytes, dest: Path) -> int:
    """Extract a gzipped tarball into *dest*, dropping the top-level directory.

    Members that would land outside *dest* are skipped.  Returns the number
    of extracted members.

    Raises:
        SourceError: If *data* is not a readable gzipped tarball.

    """
    dest.mkdir(parents=True, exist_ok=True)
    root = dest.resolve()
    count = 0
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as archive:
            for member in archive.getmembers():
                parts = Path(member.name).parts[1:]
                if not parts:
                    continue
                target = (root / Path(*parts)).resolve()
                if not target.is_relative_to(root):
                    continue
                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                elif member.isfile():
                    source = archive.extractfile(member)
                    if source is None:
                        continue
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.write_bytes(source.read())
                else:
                    continue
                count += 1
    except (tarfile.TarError, OSError, EOFError) as exc:
        msg = f"Failed to extract tarball: {exc}"
        raise SourceError(msg) from exc
    return count


class GitHubClient:
    """Async client for the GitHub REST API and codeload tarballs.

    Args:
        api_url: REST API root.
        codeload_url: Tarball host root.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).

    """

    def __init__(
        self,
        api_url: str = "https://api.github.com",
        codeload_url: str = "https://codeload.github.com",
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._codeload_url = codeload_url.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def resolve_ref(self, owner: str, repo: str, ref: str) -> str:
        """Resolve a branch, tag or short SHA to a full commit SHA.

        Raises:
            SourceError: If GitHub does not return a commit.

        """
        url = f"{self._api_url}/repos/{owner}/{repo}/commits/{ref}"
        try:
            response = await self._client.get(url, headers=_API_HEADERS)
        except httpx.HTTPError as exc:
            msg = f"Failed to resolve ref '{ref}': {exc}"
            raise SourceError(msg) from exc
        if not response.is_success:
            msg = f"Failed to resolve ref '{ref}': GitHub API returned {response.status_code}"
            raise SourceError(msg)
        try:
            sha = response.json()["sha"]
        except (ValueError, KeyError, TypeError) as exc:
            msg = f"Failed to resolve ref '{ref}': unexpected response"
            raise SourceError(msg) from exc
        return str(sha)

    async def download_tarball(self, owner: str, repo: str, ref: str) -> bytes:
        """Download the source tarball of *ref*.

        Raises:
            SourceError: On a transport error or non-2xx status.

        """
        url = f"{self._codeload_url}/{owner}/{repo}/tar.gz/{ref}"
        try:
            response = await self._client.get(url, headers={"User-Agent": USER_AGENT})
        except httpx.HTTPError as exc:
            msg = f"Failed to download tarball: {exc}"
            raise SourceError(msg) from exc
        if not response.is_success:
            msg = f"Failed to download tarball: {response.status_code}"
            raise SourceError(msg)
        return response.content

    async def lookup_pull_request(self, owner: str, repo: str, ref: str) -> str | None:
        """URL of the open pull request whose head is *ref*, if any."""
        url = f"{self._api_url}/repos/{owner}/{repo}/pulls"
        params = {"head": f"{owner}:{ref}", "state": "open", "per_page": "1"}
        try:
            response = await self._client.get(url, params=params, headers=_API_HEADERS)
            if not response.is_success:
                return None
            pulls = response.json()
        except (httpx.HTTPError, ValueError):
            return None
        if isinstance(pulls, list) and pulls and isinstance(pulls[0], dict):
            return pulls[0].get("html_url")
        return None
