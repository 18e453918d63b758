"""Base search index client — Abstract interface for search engine connectors.

Every search backend must implement this interface to serve catalog search.
The adapter is responsible for:
  1. Fuzzy text search of one collection on one field, with relevance scores
  2. Exact-match lookup of documents by identifier (used for enrichment)
  3. Reporting health status

Fuzzy matching and scoring stay inside the backend; the adapter only
translates requests and responses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class AdapterHealth(BaseModel):
    """Health status of a search adapter."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class IndexHit(BaseModel):
    """A single scored document returned by the backend."""

    document: dict[str, Any] = Field(description="Raw document fields, including its identifier")
    score: float = Field(description="Backend relevance score")


class RawResults(BaseModel):
    """Ranked search results from a backend, highest score first."""

    total_hits: int = Field(default=0, description="Total number of matching documents")
    hits: list[IndexHit] = Field(default_factory=list, description="Scored hits in backend order")
    took_ms: int = Field(default=0, description="Backend query execution time in ms")


class SearchIndexClient(ABC):
    """Abstract base class for search index adapters.

    All adapters must implement:
      - fuzzy_search(): Fuzzy match a query against one field of a collection
      - lookup(): Fetch documents of a collection by identifier
      - health_check(): Report adapter health status

    Adapters should be stateless between calls. Connection pooling
    and configuration are handled during initialization.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique adapter name (e.g., 'opensearch', 'meilisearch')."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the adapter (connections, pools, etc.).

        Called once during application startup.
        """

    @abstractmethod
    async def shutdown(self) -> None:
        """Gracefully shut down the adapter and release its connections."""

    @abstractmethod
    async def fuzzy_search(
        self,
        collection: str,
        field: str,
        query: str,
        max_edits: int,
        limit: int,
    ) -> RawResults:
        """Run a fuzzy text match against a single field.

        Args:
            collection: Collection (index) to search.
            field: Document field to match against.
            query: The search query string.
            max_edits: Maximum character edits tolerated per term.
            limit: Maximum number of hits to return.

        Returns:
            Hits ordered by descending relevance score.

        Raises:
            SearchBackendError: If the backend is unreachable or the
                response cannot be parsed.
        """

    @abstractmethod
    async def lookup(self, collection: str, ids: list[str]) -> list[dict[str, Any]]:
        """Fetch the documents whose identifiers are in ``ids``.

        Unknown identifiers are skipped, not reported.

        Args:
            collection: Collection (index) to read from.
            ids: Document identifiers.

        Returns:
            The documents found, in no particular order.
        """

    @abstractmethod
    async def health_check(self) -> AdapterHealth:
        """Check the health of the search backend."""
