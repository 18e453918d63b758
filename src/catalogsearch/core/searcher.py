"""Collection searcher — Fuzzy search of one catalog collection.

A searcher wraps the search index client for a single entity kind and adds
the catalog's result policies on top of the raw backend ranking:

  1. Fuzzy match on ``name`` with a fixed edit tolerance of 2
  2. Optional relative-score cutoff against the best candidate
  3. Result-count limit
  4. Optional enrichment of songs with their album and artists

Backend order is kept as-is; results are never re-sorted here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from catalogsearch.adapters.base.adapter import SearchIndexClient
from catalogsearch.config.settings import CollectionSettings
from catalogsearch.core.fanout import gather_or_cancel
from catalogsearch.core.shaper import document_id, to_id, to_optional_id
from catalogsearch.models.document import ScoredDocument
from catalogsearch.models.query import EntityKind, SearchOptions

logger = logging.getLogger(__name__)

NAME_FIELD = "name"
MAX_EDITS = 2

SENSITIVE_ARTIST_FIELDS = frozenset({"thumbnail", "about", "songIds", "followerIds"})
"""Artist fields never embedded in song results."""


def apply_score_threshold(results: Sequence[ScoredDocument], ratio: float) -> list[ScoredDocument]:
    """Keep results scoring at least ``ratio`` times the best score (inclusive)."""
    if not results:
        return []
    cutoff = max(result.score for result in results) * ratio
    return [result for result in results if result.score >= cutoff]


def strip_sensitive_fields(artist: dict[str, Any]) -> dict[str, Any]:
    """Project an artist document down to what may be embedded in a song."""
    return {key: value for key, value in artist.items() if key not in SENSITIVE_ARTIST_FIELDS}


def _unique(ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(ids))


class CollectionSearcher:
    """Searches one catalog collection and applies result policies.

    Args:
        client: Search index client used for searches and lookups.
        kind: Entity kind served by this searcher.
        collections: Collection names; enrichment reads the album and
            artist collections.
        candidate_limit: Number of candidates fetched when a score cutoff
            needs the full candidate set.
    """

    def __init__(
        self,
        client: SearchIndexClient,
        kind: EntityKind,
        collections: CollectionSettings,
        candidate_limit: int = 1000,
    ) -> None:
        self.kind = kind
        self._client = client
        self._collections = collections
        self._collection: str = getattr(collections, kind.value)
        self._candidate_limit = candidate_limit

    async def search(self, query: str, options: SearchOptions) -> list[ScoredDocument]:
        """Search the collection.

        Args:
            query: Non-empty search query.
            options: Limit, cutoff, and enrichment options.

        Returns:
            Results in descending score order, at most ``options.result_limit``.

        Raises:
            SearchBackendError: If the backend fails or returns malformed data.
        """
        if options.enrich and self.kind is not EntityKind.SONG:
            raise ValueError(f"Enrichment is only supported for songs, not {self.kind.value}s")

        thresholded = options.score_threshold_ratio is not None
        fetch_limit = max(self._candidate_limit, options.result_limit) if thresholded else options.result_limit

        raw = await self._client.fuzzy_search(self._collection, NAME_FIELD, query, MAX_EDITS, fetch_limit)
        results = [ScoredDocument(kind=self.kind, document=hit.document, score=hit.score) for hit in raw.hits]

        if options.score_threshold_ratio is not None:
            results = apply_score_threshold(results, options.score_threshold_ratio)
        results = results[: options.result_limit]

        if options.enrich:
            results = await self._enrich(results)

        logger.debug(
            "Searched %s for %r: %d candidates, %d returned in %d ms",
            self._collection,
            query,
            len(raw.hits),
            len(results),
            raw.took_ms,
        )
        return results

    async def _enrich(self, results: list[ScoredDocument]) -> list[ScoredDocument]:
        """Join songs with their album and artists.

        Songs whose album does not resolve are dropped; artist references
        that do not resolve are left out of ``artists``.
        """
        if not results:
            return []

        album_refs = [to_optional_id(result.document.get("albumId")) for result in results]
        artist_refs = [[to_id(ref) for ref in result.document.get("artistIds", [])] for result in results]

        albums, artists = await gather_or_cancel(
            self._client.lookup(self._collections.album, _unique(ref for ref in album_refs if ref is not None)),
            self._client.lookup(self._collections.artist, _unique(ref for refs in artist_refs for ref in refs)),
        )
        albums_by_id = {document_id(album): album for album in albums}
        artists_by_id = {document_id(artist): strip_sensitive_fields(artist) for artist in artists}

        enriched: list[ScoredDocument] = []
        for result, album_ref, refs in zip(results, album_refs, artist_refs, strict=True):
            album = albums_by_id.get(album_ref) if album_ref is not None else None
            if album is None:
                continue
            document = {
                **result.document,
                "album": album,
                "artists": [artists_by_id[ref] for ref in refs if ref in artists_by_id],
            }
            enriched.append(result.model_copy(update={"document": document}))

        if len(enriched) < len(results):
            logger.debug("Dropped %d songs with unresolved albums", len(results) - len(enriched))
        return enriched
