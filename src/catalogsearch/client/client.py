"""Catalog Search Python SDK — Async and sync clients for the REST API.

Usage::

    # Async
    async with AsyncCatalogSearchClient("http://localhost:3000") as client:
        response = await client.search("beatles")

    # Sync (wraps async client internally)
    client = CatalogSearchClient("http://localhost:3000")
    response = client.search("beatles")
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar, cast

import httpx

_T = TypeVar("_T")

logger = logging.getLogger(__name__)

Envelope = dict[str, Any]
"""Response envelope dict with ``status``, ``message``, and ``data`` keys."""


class CatalogSearchError(Exception):
    """Raised when the server answers with ``status: false``.

    Attributes:
        status_code: HTTP status code of the response.
        envelope: The decoded error envelope.
    """

    def __init__(self, status_code: int, envelope: Envelope) -> None:
        super().__init__(f"HTTP {status_code}: {envelope.get('message', 'unknown error')}")
        self.status_code = status_code
        self.envelope = envelope


# ═══════════════════════════════════════════════════════════════════════════════
# Async client
# ═══════════════════════════════════════════════════════════════════════════════


class AsyncCatalogSearchClient:
    """Async Python client for the catalog search API.

    Args:
        base_url: Server URL, e.g. ``"http://localhost:3000"``.
        timeout: Request timeout in seconds.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        *,
        timeout: float = 30.0,
        **httpx_kwargs: Any,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            **httpx_kwargs,
        )

    async def __aenter__(self) -> AsyncCatalogSearchClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def health(self) -> dict[str, Any]:
        """Check server health."""
        resp = await self._client.get("/health")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    async def search(self, query: str) -> Envelope:
        """Unified search: top albums, songs, artists, and ``topResult``."""
        return await self._get("/v3/search", query)

    async def search_albums(self, query: str) -> Envelope:
        """Album-only search."""
        return await self._get("/v3/search/albums", query)

    async def search_songs(self, query: str) -> Envelope:
        """Song-only search (songs include their album and artists)."""
        return await self._get("/v3/search/songs", query)

    async def search_artists(self, query: str) -> Envelope:
        """Artist-only search."""
        return await self._get("/v3/search/artists", query)

    async def _get(self, path: str, query: str) -> Envelope:
        resp = await self._client.get(path, params={"q": query})
        try:
            envelope = cast(Envelope, resp.json())
        except ValueError:
            resp.raise_for_status()
            raise
        if resp.is_error or not envelope.get("status", False):
            raise CatalogSearchError(resp.status_code, envelope)
        return envelope


# ═══════════════════════════════════════════════════════════════════════════════
# Sync client (wraps AsyncCatalogSearchClient)
# ═══════════════════════════════════════════════════════════════════════════════


class CatalogSearchClient:
    """Synchronous Python client for the catalog search API.

    Wraps :class:`AsyncCatalogSearchClient` using ``asyncio.run``; each call
    opens and closes its own connection.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        *,
        timeout: float = 30.0,
        **httpx_kwargs: Any,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._httpx_kwargs = httpx_kwargs

    def _run(self, coro: Coroutine[Any, Any, _T]) -> _T:
        """Run an async coroutine synchronously."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop and loop.is_running():
            # Already inside an event loop (e.g. Jupyter): run in a worker thread
            import concurrent.futures

            with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
                return pool.submit(asyncio.run, coro).result()
        return asyncio.run(coro)

    def _make_client(self) -> AsyncCatalogSearchClient:
        return AsyncCatalogSearchClient(self._base_url, timeout=self._timeout, **self._httpx_kwargs)

    def health(self) -> dict[str, Any]:
        async def _call() -> dict[str, Any]:
            async with self._make_client() as client:
                return await client.health()

        return self._run(_call())

    def search(self, query: str) -> Envelope:
        return self._run(self._call("search", query))

    def search_albums(self, query: str) -> Envelope:
        return self._run(self._call("search_albums", query))

    def search_songs(self, query: str) -> Envelope:
        return self._run(self._call("search_songs", query))

    def search_artists(self, query: str) -> Envelope:
        return self._run(self._call("search_artists", query))

    async def _call(self, method: str, query: str) -> Envelope:
        async with self._make_client() as client:
            return cast(Envelope, await getattr(client, method)(query))
