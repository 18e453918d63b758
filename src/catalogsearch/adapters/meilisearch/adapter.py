"""MeiliSearch adapter — Typo-tolerant catalog search over the REST API.

Each catalog collection maps to one MeiliSearch index (UID).  This adapter
communicates via the REST API using ``httpx``; no extra dependencies are
required.

MeiliSearch has no per-query edit distance.  Typo tolerance is an index
setting capped at two typos per word; a smaller ``max_edits`` is logged and
ignored.

The ``id`` attribute must be filterable for :meth:`MeiliSearchAdapter.lookup`.

Usage::

    adapter = MeiliSearchAdapter(base_url="http://localhost:7700", api_key="master-key")
    await adapter.initialize()
    results = await adapter.fuzzy_search("Album", "name", "abbey road", max_edits=2, limit=5)
"""

from __future__ import annotations

import json
import logging
import time
from datetime import UTC, datetime
from typing import Any

import httpx

from catalogsearch.adapters.base.adapter import AdapterHealth, IndexHit, RawResults, SearchIndexClient
from catalogsearch.adapters.base.exceptions import BackendConnectionError, QueryError

logger = logging.getLogger(__name__)


class MeiliSearchAdapter(SearchIndexClient):
    """Search index client for MeiliSearch.

    Args:
        base_url: MeiliSearch instance URL, e.g. ``"http://localhost:7700"``.
        api_key: Master key or API key for authentication.
        timeout: HTTP request timeout in seconds.
        **kwargs: Extra keyword arguments stored for future use.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:7700",
        api_key: str | None = None,
        timeout: float = 10.0,
        **kwargs: Any,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._extra_kwargs = kwargs
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "meilisearch"

    async def initialize(self) -> None:
        """Create an ``httpx.AsyncClient`` and verify connection to MeiliSearch."""
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers=headers,
        )

        try:
            resp = await self._client.get("/health")
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise BackendConnectionError(f"Failed to connect to MeiliSearch: {e}") from e

        if data.get("status") != "available":
            raise BackendConnectionError(f"MeiliSearch not available: {data}")
        logger.info("Connected to MeiliSearch at %s", self._base_url)

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── Search ───────────────────────────────────────────────────────────

    async def fuzzy_search(
        self,
        collection: str,
        field: str,
        query: str,
        max_edits: int,
        limit: int,
    ) -> RawResults:
        """Search index ``collection`` restricted to ``field``, with ranking scores."""
        if not self._client:
            raise BackendConnectionError("MeiliSearch client not initialized.")
        if max_edits < 2:
            logger.warning("MeiliSearch typo tolerance is set per index; ignoring max_edits=%d", max_edits)

        payload: dict[str, Any] = {
            "q": query,
            "limit": limit,
            "offset": 0,
            "attributesToSearchOn": [field],
            "showRankingScore": True,
        }

        try:
            start = time.monotonic()
            resp = await self._client.post(f"/indexes/{collection}/search", json=payload)
            resp.raise_for_status()
            took_ms = int((time.monotonic() - start) * 1000)
            data = resp.json()
        except httpx.HTTPError as e:
            raise QueryError(f"MeiliSearch query failed: {e}") from e
        except ValueError as e:
            raise QueryError(f"MeiliSearch returned invalid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("hits", []), list):
            raise QueryError(f"MeiliSearch returned an unexpected search response: {data!r}")
        hits = data.get("hits", [])
        return RawResults(
            total_hits=data.get("estimatedTotalHits", data.get("totalHits", len(hits))),
            hits=[self._to_index_hit(hit) for hit in hits],
            took_ms=took_ms,
        )

    async def lookup(self, collection: str, ids: list[str]) -> list[dict[str, Any]]:
        """Fetch documents whose ``id`` is in ``ids`` via the documents fetch endpoint."""
        if not self._client:
            raise BackendConnectionError("MeiliSearch client not initialized.")
        if not ids:
            return []

        payload = {
            "filter": f"id IN [{', '.join(json.dumps(doc_id) for doc_id in ids)}]",
            "limit": len(ids),
        }
        try:
            resp = await self._client.post(f"/indexes/{collection}/documents/fetch", json=payload)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to fetch documents from MeiliSearch: {e}") from e
        except ValueError as e:
            raise QueryError(f"MeiliSearch returned invalid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("results", []), list):
            raise QueryError(f"MeiliSearch returned an unexpected documents response: {data!r}")
        return list(data.get("results", []))

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> AdapterHealth:
        """Check MeiliSearch health."""
        if not self._client:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            resp = await self._client.get("/health")
            latency_ms = int((time.monotonic() - start) * 1000)

            if resp.status_code == 200:
                status = resp.json().get("status", "unknown")
                return AdapterHealth(
                    status="healthy" if status == "available" else "degraded",
                    latency_ms=latency_ms,
                    last_check=datetime.now(UTC).isoformat(),
                    message=f"status: {status}",
                )
            return AdapterHealth(
                status="degraded",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"MeiliSearch returned HTTP {resp.status_code}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _to_index_hit(hit: dict[str, Any]) -> IndexHit:
        """Split ``_rankingScore`` off a hit; drop other ``_``-prefixed annotations."""
        score = hit.get("_rankingScore") if isinstance(hit, dict) else None
        if not isinstance(score, int | float):
            raise QueryError(f"MeiliSearch hit without ranking score: {hit!r}")
        document = {key: value for key, value in hit.items() if not key.startswith("_")}
        return IndexHit(document=document, score=float(score))
