"""Search response models — The ``{status, message, data}`` envelope and its payloads.

The envelope shape and its field names are the compatibility surface shared
with existing clients:

- Success: ``{"status": true, "message": "Search results", "data": {...}}``
- Bad request: ``{"status": false, "message": "Bad Request", "data": {"query": "..."}}``
- Server error: ``{"status": false, "message": "Internal Server Error", "data": {}}``
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from catalogsearch.models.catalog import Album, Artist, ArtistSummary, CatalogRecord, EnrichedSong

DataT = TypeVar("DataT")

SUCCESS_MESSAGE = "Search results"
BAD_REQUEST_MESSAGE = "Bad Request"
INTERNAL_ERROR_MESSAGE = "Internal Server Error"
MISSING_QUERY_DETAIL = "Query parameter is required"


class Envelope(BaseModel, Generic[DataT]):
    """Uniform response wrapper for every search endpoint."""

    status: bool = Field(description="True on success, false on any error")
    message: str = Field(description="Short human-readable outcome")
    data: DataT = Field(description="Endpoint payload; empty object on server errors")


# ═══════════════════════════════════════════════════════════════════════════════
# Payloads
# ═══════════════════════════════════════════════════════════════════════════════


class UnifiedSearchData(CatalogRecord):
    """Payload of the unified search: one headline pick plus every kind."""

    query: str = Field(description="Original query string")
    top_result: Album | EnrichedSong | Artist | None = Field(
        default=None,
        description="Best first-place hit across kinds, or null when nothing matched",
    )
    albums: list[Album] = Field(default_factory=list, description="Top album matches")
    songs: list[EnrichedSong] = Field(default_factory=list, description="Top song matches")
    artists: list[Artist] = Field(default_factory=list, description="Top artist matches")


class AlbumSearchData(CatalogRecord):
    """Payload of the album-only search."""

    query: str = Field(description="Original query string")
    albums: list[Album] = Field(default_factory=list, description="Album matches above the relevance cutoff")


class SongSearchData(CatalogRecord):
    """Payload of the song-only search."""

    query: str = Field(description="Original query string")
    songs: list[EnrichedSong] = Field(default_factory=list, description="Song matches above the relevance cutoff")


class ArtistSearchData(CatalogRecord):
    """Payload of the artist-only search."""

    query: str = Field(description="Original query string")
    artists: list[ArtistSummary] = Field(default_factory=list, description="Artist matches above the relevance cutoff")


# ═══════════════════════════════════════════════════════════════════════════════
# Envelope builders
# ═══════════════════════════════════════════════════════════════════════════════


def success_envelope(data: CatalogRecord) -> dict[str, Any]:
    """Wrap a payload in a success envelope, rendered as JSON-ready dict.

    The payload is dumped on its own so subclass fields and camelCase
    aliases survive.
    """
    return {
        "status": True,
        "message": SUCCESS_MESSAGE,
        "data": data.model_dump(mode="json", by_alias=True),
    }


def bad_request_envelope() -> dict[str, Any]:
    """Envelope returned when the ``q`` parameter is missing or empty."""
    envelope = Envelope[dict[str, str]](
        status=False,
        message=BAD_REQUEST_MESSAGE,
        data={"query": MISSING_QUERY_DETAIL},
    )
    return envelope.model_dump(mode="json")


def internal_error_envelope() -> dict[str, Any]:
    """Envelope returned on any server-side failure; carries no details."""
    envelope = Envelope[dict[str, Any]](status=False, message=INTERNAL_ERROR_MESSAGE, data={})
    return envelope.model_dump(mode="json")
