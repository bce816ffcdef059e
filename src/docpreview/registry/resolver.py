"""Published snapshot resolution — local cache first, network second.

Each lookup tries an ordered list of sources and returns the first result
that is not None.  Cache reads run in a worker thread; the registry is awaited.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from docpreview.registry.versions import latest_version

if TYPE_CHECKING:
    from docpreview.registry.cache import PackageCache
    from docpreview.registry.client import RegistryClient


@dataclass(frozen=True, slots=True)
class PublishedBaseline:
    """The latest published release of a package.

    Attributes:
        version: Published version string.
        docs: Decoded ``docs.json`` (None if neither source had it).
        readme: README text (None if neither source had it).

    """

    version: str
    docs: Any
    readme: str | None


class PublishedResolver:
    """Resolve published versions, docs and READMEs.

    Args:
        cache: Local package cache, or None to skip it.
        client: Registry client, or None to work offline.

    """

    def __init__(
        self,
        cache: PackageCache | None = None,
        client: RegistryClient | None = None,
    ) -> None:
        self._cache = cache
        self._client = client

    async def latest_version(self, name: str) -> str | None:
        if self._cache is not None:
            version = await asyncio.to_thread(self._cache.latest_version, name)
            if version is not None:
                return version
        if self._client is not None:
            releases = await self._client.releases(name)
            if releases:
                return latest_version(releases)
        return None

    async def docs(self, name: str, version: str) -> Any:
        if self._cache is not None:
            docs = await asyncio.to_thread(self._cache.read_docs, name, version)
            if docs is not None:
                return docs
        if self._client is not None:
            return await self._client.docs(name, version)
        return None

    async def readme(self, name: str, version: str) -> str | None:
        if self._cache is not None:
            readme = await asyncio.to_thread(self._cache.read_readme, name, version)
            if readme is not None:
                return readme
        if self._client is not None:
            return await self._client.readme(name, version)
        return None

    async def load_baseline(self, name: str) -> PublishedBaseline | None:
        """Load the latest published docs and README of *name*.

        Returns None when the package has never been published.

        """
        version = await self.latest_version(name)
        if version is None:
            return None
        docs, readme = await asyncio.gather(
            self.docs(name, version),
            self.readme(name, version),
        )
        return PublishedBaseline(version=version, docs=docs, readme=readme)
