"""OpenSearch adapter — Fuzzy catalog search against OpenSearch (v2+).

Each catalog collection maps to one OpenSearch index.  Searches use a
``match`` query with explicit ``fuzziness`` on a single field; lookups use
``mget`` so enrichment is an exact-id join.

Install the optional dependency::

    pip install catalogsearch[opensearch]
    # or: pip install opensearch-py
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any

from catalogsearch.adapters.base.adapter import AdapterHealth, IndexHit, RawResults, SearchIndexClient
from catalogsearch.adapters.base.exceptions import (
    BackendConnectionError,
    ConfigurationError,
    QueryError,
)

logger = logging.getLogger(__name__)


class OpenSearchAdapter(SearchIndexClient):
    """Search index client for OpenSearch (v2+).

    Args:
        hosts: List of OpenSearch node URLs.
        username: Optional HTTP basic-auth username.
        password: Optional HTTP basic-auth password.
        verify_certs: Whether to verify TLS certificates.
        timeout: Request timeout in seconds.
        **kwargs: Additional keyword arguments forwarded to ``AsyncOpenSearch``.
    """

    def __init__(
        self,
        hosts: list[str] | None = None,
        username: str | None = None,
        password: str | None = None,
        verify_certs: bool = True,
        timeout: float = 10.0,
        **kwargs: Any,
    ) -> None:
        self._hosts = hosts or ["https://localhost:9200"]
        self._username = username
        self._password = password
        self._verify_certs = verify_certs
        self._timeout = timeout
        self._extra_kwargs = kwargs
        self._client: Any = None

    @property
    def name(self) -> str:
        return "opensearch"

    async def initialize(self) -> None:
        """Create and verify the ``AsyncOpenSearch`` client."""
        try:
            from opensearchpy import AsyncOpenSearch
        except ImportError as e:
            raise ConfigurationError(
                "opensearch-py package is required.  Install with: pip install catalogsearch[opensearch]"
            ) from e

        client_kwargs: dict[str, Any] = {
            "hosts": self._hosts,
            "verify_certs": self._verify_certs,
            "ssl_show_warn": False,
            "timeout": self._timeout,
        }
        if self._username and self._password:
            client_kwargs["http_auth"] = (self._username, self._password)

        client_kwargs.update(self._extra_kwargs)

        try:
            self._client = AsyncOpenSearch(**client_kwargs)
            info = await self._client.info()
            version = info.get("version", {}).get("number", "unknown")
            cluster = info.get("cluster_name", "unknown")
            logger.info("Connected to OpenSearch cluster: %s (v%s)", cluster, version)
        except Exception as e:
            raise BackendConnectionError(f"Failed to connect to OpenSearch: {e}") from e

    async def shutdown(self) -> None:
        """Close the OpenSearch client."""
        if self._client:
            await self._client.close()
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
        """Run a fuzzy ``match`` query on ``field`` of index ``collection``."""
        if not self._client:
            raise BackendConnectionError("OpenSearch client not initialized.")

        body: dict[str, Any] = {
            "query": {
                "match": {
                    field: {
                        "query": query,
                        "fuzziness": max_edits,
                    }
                }
            },
            "size": limit,
            "track_total_hits": True,
        }

        try:
            start = time.monotonic()
            response = await self._client.search(index=collection, body=body)
            took_ms = int((time.monotonic() - start) * 1000)
        except Exception as e:
            raise QueryError(f"OpenSearch query failed: {e}") from e

        hits = response.get("hits", {})
        total = hits.get("total", {}).get("value", 0)
        return RawResults(
            total_hits=total,
            hits=[self._to_index_hit(hit) for hit in hits.get("hits", [])],
            took_ms=took_ms,
        )

    async def lookup(self, collection: str, ids: list[str]) -> list[dict[str, Any]]:
        """Fetch documents by ``_id`` with a multi-get."""
        if not self._client:
            raise BackendConnectionError("OpenSearch client not initialized.")
        if not ids:
            return []

        try:
            response = await self._client.mget(index=collection, body={"ids": ids})
        except Exception as e:
            raise QueryError(f"OpenSearch lookup failed: {e}") from e

        return [{"_id": doc["_id"], **doc.get("_source", {})} for doc in response.get("docs", []) if doc.get("found")]

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> AdapterHealth:
        """Check OpenSearch cluster health."""
        if not self._client:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            health = await self._client.cluster.health()
            latency_ms = int((time.monotonic() - start) * 1000)

            status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}

            return AdapterHealth(
                status=status_map.get(health.get("status", "red"), "unhealthy"),
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Cluster: {health.get('cluster_name')}, Nodes: {health.get('number_of_nodes')}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _to_index_hit(hit: dict[str, Any]) -> IndexHit:
        """Flatten ``_id`` and ``_source`` into one document and keep ``_score``."""
        score = hit.get("_score")
        if not isinstance(score, int | float) or "_id" not in hit:
            raise QueryError(f"OpenSearch returned a malformed hit: {hit!r}")
        return IndexHit(document={"_id": hit["_id"], **hit.get("_source", {})}, score=float(score))
