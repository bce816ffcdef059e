"""Registry client — published releases, docs and READMEs over HTTP.

Uses a shared ``httpx.AsyncClient``.  Every fetch returns None on a non-2xx
status, a transport error or an undecodable body, so callers can fall back
without exception handling.
"""

from __future__ import annotations

from typing import Any

import httpx

USER_AGENT = "docpreview"


class RegistryClient:
    """Async client for the public package registry.

    Args:
        base_url: Registry root, e.g. ``https://package.elm-lang.org``.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).

    """

    def __init__(
        self,
        base_url: str = "https://package.elm-lang.org",
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            transport=transport,
            follow_redirects=True,
        )

    async def __aenter__(self) -> RegistryClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str) -> httpx.Response | None:
        try:
            response = await self._client.get(path)
        except httpx.HTTPError:
            return None
        if not response.is_success:
            return None
        return response

    async def _get_json(self, path: str) -> Any:
        response = await self._get(path)
        if response is None:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    async def releases(self, name: str) -> dict[str, int] | None:
        """Published versions mapped to their release timestamps."""
        data = await self._get_json(f"/packages/{name}/releases.json")
        return data if isinstance(data, dict) else None

    async def docs(self, name: str, version: str) -> Any:
        """Decoded ``docs.json`` of a published release."""
        return await self._get_json(f"/packages/{name}/{version}/docs.json")

    async def readme(self, name: str, version: str) -> str | None:
        response = await self._get(f"/packages/{name}/{version}/README.md")
        return response.text if response is not None else None
