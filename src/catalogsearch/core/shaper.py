"""Response shaper — Maps raw catalog documents to client-facing records.

Pure, stateless functions, one per shape.  Raw documents may carry
identifiers and references as plain strings or as extended-JSON wrappers
(``{"$oid": "..."}``) and dates as ISO strings, epoch milliseconds, or
``{"$date": ...}`` wrappers; all of them come out as plain strings and
datetimes.  Malformed documents raise ``KeyError``/``ValueError``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from catalogsearch.models.catalog import Album, Artist, ArtistSummary, EnrichedSong


def to_id(value: Any) -> str:
    """Extract a plain string identifier from a raw id or reference."""
    if isinstance(value, dict):
        return str(value["$oid"])
    return str(value)


def to_optional_id(value: Any) -> str | None:
    """Like :func:`to_id`, but a missing reference becomes ``None``."""
    return None if value is None else to_id(value)


def document_id(document: dict[str, Any]) -> str:
    """Identifier of a raw document (``_id``, falling back to ``id``)."""
    return to_id(document["_id"] if "_id" in document else document["id"])


def to_datetime(value: Any) -> datetime:
    """Parse a raw date value into a timezone-aware datetime."""
    if isinstance(value, dict):
        value = value["$date"]
        if isinstance(value, dict):
            value = int(value["$numberLong"])
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, int | float):
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def shape_album(document: dict[str, Any]) -> Album:
    return Album(
        id=document_id(document),
        name=document["name"],
        image=document["image"],
        color=document["color"],
        release=to_datetime(document["release"]),
        label_id=to_optional_id(document.get("labelId")),
    )


def shape_artist(document: dict[str, Any]) -> Artist:
    """Top-level artist result; profile fields are always blanked."""
    return Artist(
        id=document_id(document),
        name=document["name"],
        image=document["image"],
    )


def shape_artist_summary(document: dict[str, Any]) -> ArtistSummary:
    return ArtistSummary(
        id=document_id(document),
        name=document["name"],
        image=document["image"],
    )


def shape_song(document: dict[str, Any]) -> EnrichedSong:
    """Flatten an enriched song; ``album`` and ``artists`` must already be resolved."""
    return EnrichedSong(
        id=document_id(document),
        name=document["name"],
        image=document["image"],
        url=document["url"],
        duration=document["duration"],
        album_id=to_id(document["albumId"]),
        artist_ids=[to_id(ref) for ref in document.get("artistIds", [])],
        album=shape_album(document["album"]),
        artists=[shape_artist_summary(artist) for artist in document.get("artists", [])],
    )
