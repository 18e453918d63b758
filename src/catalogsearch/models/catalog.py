"""Catalog records — Client-facing shapes for albums, songs, and artists.

Every shape is an explicit model: a field that is not declared here can never
reach a client, even if the backing document grows new fields.  JSON keys are
camelCase (``labelId``, ``artistIds``, ``topResult``...) to stay compatible
with existing clients.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ``2021-03-04T00:00:00.000Z``.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CatalogRecord(BaseModel):
    """Base for client-facing records (camelCase aliases)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Album(CatalogRecord):
    """Album as returned in search results and inside enriched songs."""

    id: str = Field(description="Album identifier")
    name: str = Field(description="Album title")
    image: str = Field(description="Cover image URL")
    color: str = Field(description="Dominant cover color")
    release: datetime = Field(description="Release date")
    label_id: str | None = Field(default=None, description="Record label identifier, if any")

    @field_serializer("release")
    def _serialize_release(self, value: datetime) -> str:
        return format_timestamp(value)


class Artist(CatalogRecord):
    """Artist as returned by the unified search.

    Profile fields are blanked in search context; only the identity fields
    carry data.
    """

    id: str = Field(description="Artist identifier")
    name: str = Field(description="Artist name")
    image: str = Field(description="Artist image URL")
    thumbnail: str | None = Field(default=None, description="Always null in search results")
    about: str = Field(default="", description="Always empty in search results")
    song_ids: list[str] = Field(default_factory=list, description="Always empty in search results")
    follower_ids: list[str] = Field(default_factory=list, description="Always empty in search results")


class ArtistSummary(CatalogRecord):
    """Minimal artist record used inside songs and by the artist-only search."""

    id: str = Field(description="Artist identifier")
    name: str = Field(description="Artist name")
    image: str = Field(description="Artist image URL")


class EnrichedSong(CatalogRecord):
    """Song with its album and artists resolved."""

    id: str = Field(description="Song identifier")
    name: str = Field(description="Song title")
    image: str = Field(description="Song artwork URL")
    url: str = Field(description="Audio stream URL")
    duration: int | float = Field(description="Duration in seconds")
    album_id: str = Field(description="Identifier of the song's album")
    artist_ids: list[str] = Field(default_factory=list, description="Identifiers of the song's artists, in order")
    album: Album = Field(description="Resolved album record")
    artists: list[ArtistSummary] = Field(default_factory=list, description="Resolved artist summaries, in order")


TopResult = Album | EnrichedSong | Artist
"""Any record that can be picked as the unified top result."""
