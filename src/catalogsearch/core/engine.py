"""Catalog search engine — Entry point for the four search operations.

The engine owns the adapter registry and builds fresh searchers for every
request, so nothing is shared between requests except the backend client's
connection pool.

Operations:
  - ``search``: unified search over every kind with a top result
  - ``search_albums`` / ``search_songs`` / ``search_artists``: single-kind
    searches with a relative-score cutoff and a larger result limit
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from catalogsearch.adapters.base.registry import AdapterRegistry
from catalogsearch.core.exceptions import validate_query
from catalogsearch.core.merger import RankedMerger
from catalogsearch.core.searcher import CollectionSearcher
from catalogsearch.core.shaper import shape_album, shape_artist_summary, shape_song
from catalogsearch.models.document import ScoredDocument
from catalogsearch.models.query import SCOPED_OPTIONS, EntityKind
from catalogsearch.models.response import AlbumSearchData, ArtistSearchData, SongSearchData, UnifiedSearchData

if TYPE_CHECKING:
    from catalogsearch.adapters.base.adapter import SearchIndexClient
    from catalogsearch.config.settings import Settings

logger = logging.getLogger(__name__)


class CatalogSearchEngine:
    """Orchestrates catalog searches against the configured backend.

    Attributes:
        settings: Application configuration.
        adapter_registry: Registry of search index clients.
    """

    def __init__(self, settings: Settings, client: SearchIndexClient | None = None) -> None:
        self.settings = settings
        self.adapter_registry = AdapterRegistry()
        self._client = client

    @property
    def client(self) -> SearchIndexClient:
        """The search index client in use (injected, or the default adapter)."""
        if self._client is not None:
            return self._client
        return self.adapter_registry.get(self.settings.search.default_adapter)

    async def shutdown(self) -> None:
        """Gracefully shut down all adapters."""
        await self.adapter_registry.shutdown_all()
        logger.info("Catalog search engine shut down")

    def searcher(self, kind: EntityKind) -> CollectionSearcher:
        """Build a searcher for ``kind`` bound to the current client."""
        return CollectionSearcher(
            self.client,
            kind,
            self.settings.search.collections,
            candidate_limit=self.settings.search.candidate_limit,
        )

    # ──────────────────────────────────────────────────────────────────────
    # Unified search
    # ──────────────────────────────────────────────────────────────────────

    async def search(self, query: str | None) -> UnifiedSearchData:
        """Search albums, songs, and artists at once and pick a top result."""
        query = validate_query(query)
        start_time = time.monotonic()
        merger = RankedMerger({kind: self.searcher(kind) for kind in EntityKind})
        data = await merger.merge_and_rank(query)
        logger.info(
            "Unified search complete: %d albums, %d songs, %d artists in %d ms",
            len(data.albums),
            len(data.songs),
            len(data.artists),
            int((time.monotonic() - start_time) * 1000),
        )
        return data

    # ──────────────────────────────────────────────────────────────────────
    # Single-kind searches
    # ──────────────────────────────────────────────────────────────────────

    async def search_albums(self, query: str | None) -> AlbumSearchData:
        """Albums scoring at least half of the best album match."""
        query = validate_query(query)
        results = await self._search_scoped(EntityKind.ALBUM, query)
        return AlbumSearchData(query=query, albums=[shape_album(result.document) for result in results])

    async def search_songs(self, query: str | None) -> SongSearchData:
        """Enriched songs scoring at least half of the best song match."""
        query = validate_query(query)
        results = await self._search_scoped(EntityKind.SONG, query)
        return SongSearchData(query=query, songs=[shape_song(result.document) for result in results])

    async def search_artists(self, query: str | None) -> ArtistSearchData:
        """Artists scoring at least three quarters of the best artist match."""
        query = validate_query(query)
        results = await self._search_scoped(EntityKind.ARTIST, query)
        return ArtistSearchData(query=query, artists=[shape_artist_summary(result.document) for result in results])

    async def _search_scoped(self, kind: EntityKind, query: str) -> list[ScoredDocument]:
        start_time = time.monotonic()
        results = await self.searcher(kind).search(query, SCOPED_OPTIONS[kind])
        logger.info(
            "%s search complete: %d results in %d ms",
            kind.value.capitalize(),
            len(results),
            int((time.monotonic() - start_time) * 1000),
        )
        return results
