"""Query models — Entity kinds and per-collection search options."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class EntityKind(str, Enum):
    """Searchable catalog entity kinds.

    Declaration order is the tie-break precedence used when picking the
    unified top result: albums first, then songs, then artists.
    """

    ALBUM = "album"
    SONG = "song"
    ARTIST = "artist"


class SearchOptions(BaseModel):
    """Options controlling a single collection search."""

    result_limit: int = Field(default=5, ge=1, le=100, description="Maximum number of results to return")
    score_threshold_ratio: float | None = Field(
        default=None,
        gt=0.0,
        le=1.0,
        description="Keep only results scoring at least this fraction of the best candidate score",
    )
    enrich: bool = Field(default=False, description="Resolve album and artist references (songs only)")


UNIFIED_OPTIONS = SearchOptions(result_limit=5)
"""Options used for every kind on the unified search path."""

SCOPED_OPTIONS: dict[EntityKind, SearchOptions] = {
    EntityKind.ALBUM: SearchOptions(result_limit=20, score_threshold_ratio=0.5),
    EntityKind.SONG: SearchOptions(result_limit=20, score_threshold_ratio=0.5, enrich=True),
    # Artist names are short and collide more easily, so the cutoff is tighter.
    EntityKind.ARTIST: SearchOptions(result_limit=20, score_threshold_ratio=0.75),
}
"""Options used by the single-kind endpoints."""
