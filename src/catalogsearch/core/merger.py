"""Ranked merger — Unified search across albums, songs, and artists.

One query fans out to the three collection searchers at once.  Each kind
keeps its own top five; the headline ``topResult`` is the first-place hit of
whichever kind scored highest, with ties going to albums, then songs, then
artists.  Only the first-place hits are compared: the response always shows
one list per kind plus a single pick, never a global top-K.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from catalogsearch.core.exceptions import validate_query
from catalogsearch.core.fanout import gather_or_cancel
from catalogsearch.core.searcher import CollectionSearcher
from catalogsearch.core.shaper import shape_album, shape_artist, shape_song
from catalogsearch.models.catalog import TopResult
from catalogsearch.models.document import ScoredDocument, TopPick
from catalogsearch.models.query import UNIFIED_OPTIONS, EntityKind
from catalogsearch.models.response import UnifiedSearchData

logger = logging.getLogger(__name__)


def pick_top(results: Mapping[EntityKind, Sequence[ScoredDocument]]) -> TopPick | None:
    """Pick the best first-place hit across kinds.

    An empty list counts as a score of negative infinity.  Kinds are checked
    in ``EntityKind`` declaration order and the first one whose leader
    scores at least as high as every other leader wins.

    Returns:
        The winning pick, or ``None`` when every list is empty.
    """
    leaders = {kind: results[kind][0] for kind in EntityKind if results.get(kind)}
    if not leaders:
        return None

    best = max(leader.score for leader in leaders.values())
    for kind in EntityKind:
        leader = leaders.get(kind)
        if leader is not None and leader.score >= best:
            return TopPick(kind=kind, score=leader.score, result=leader)
    return None


class RankedMerger:
    """Runs every collection searcher concurrently and merges their results.

    Args:
        searchers: One searcher per entity kind.
    """

    def __init__(self, searchers: Mapping[EntityKind, CollectionSearcher]) -> None:
        missing = [kind.value for kind in EntityKind if kind not in searchers]
        if missing:
            raise ValueError(f"Missing searchers for: {', '.join(missing)}")
        self._searchers = dict(searchers)

    async def merge_and_rank(self, query: str | None) -> UnifiedSearchData:
        """Search all kinds and assemble the unified response payload.

        Raises:
            QueryValidationError: If ``query`` is missing or empty.
            SearchBackendError: If any of the three searches fails; the
                other searches are cancelled.
        """
        query = validate_query(query)

        albums, songs, artists = await gather_or_cancel(
            self._searchers[EntityKind.ALBUM].search(query, UNIFIED_OPTIONS),
            self._searchers[EntityKind.SONG].search(query, UNIFIED_OPTIONS.model_copy(update={"enrich": True})),
            self._searchers[EntityKind.ARTIST].search(query, UNIFIED_OPTIONS),
        )

        pick = pick_top({EntityKind.ALBUM: albums, EntityKind.SONG: songs, EntityKind.ARTIST: artists})

        shaped: dict[EntityKind, list[TopResult]] = {
            EntityKind.ALBUM: [shape_album(result.document) for result in albums],
            EntityKind.SONG: [shape_song(result.document) for result in songs],
            EntityKind.ARTIST: [shape_artist(result.document) for result in artists],
        }
        top_result = shaped[pick.kind][0] if pick else None

        if pick:
            logger.info("Unified search %r: top result is a %s (score %.3f)", query, pick.kind.value, pick.score)
        else:
            logger.info("Unified search %r: no matches", query)

        return UnifiedSearchData(
            query=query,
            top_result=top_result,
            albums=shaped[EntityKind.ALBUM],
            songs=shaped[EntityKind.SONG],
            artists=shaped[EntityKind.ARTIST],
        )
