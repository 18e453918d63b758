"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from catalogsearch.adapters.base.adapter import AdapterHealth, IndexHit, RawResults, SearchIndexClient
from catalogsearch.config.settings import Settings
from catalogsearch.core.shaper import document_id

# ── Catalog document builders ────────────────────────────────────────────────


def make_album(album_id: str, name: str, *, release: str = "1969-09-26T00:00:00Z", label_id: str | None = None) -> dict:
    doc: dict[str, Any] = {
        "_id": {"$oid": album_id},
        "name": name,
        "image": f"https://img.example.com/albums/{album_id}.jpg",
        "color": "#1f1f1f",
        "release": {"$date": release},
    }
    if label_id is not None:
        doc["labelId"] = {"$oid": label_id}
    return doc


def make_artist(artist_id: str, name: str) -> dict:
    return {
        "_id": {"$oid": artist_id},
        "name": name,
        "image": f"https://img.example.com/artists/{artist_id}.jpg",
        "thumbnail": f"https://img.example.com/artists/{artist_id}_thumb.jpg",
        "about": f"About {name}",
        "songIds": [{"$oid": "s-private"}],
        "followerIds": [{"$oid": "u-private"}],
    }


def make_song(song_id: str, name: str, album_id: str, artist_ids: list[str], *, duration: int = 245) -> dict:
    return {
        "_id": {"$oid": song_id},
        "name": name,
        "image": f"https://img.example.com/songs/{song_id}.jpg",
        "url": f"https://cdn.example.com/songs/{song_id}.mp3",
        "duration": duration,
        "albumId": {"$oid": album_id},
        "artistIds": [{"$oid": artist_id} for artist_id in artist_ids],
    }


# ── Stub search backend ──────────────────────────────────────────────────────


class StubIndexClient(SearchIndexClient):
    """In-memory search backend returning pre-ranked hits per collection.

    ``hits`` maps a collection name to ``(document, score)`` pairs already in
    descending score order; ``documents`` holds what ``lookup`` can resolve.
    """

    def __init__(
        self,
        hits: dict[str, list[tuple[dict, float]]] | None = None,
        documents: dict[str, list[dict]] | None = None,
    ) -> None:
        self.hits = hits or {}
        self.documents = documents or {}
        self.failures: dict[str, Exception] = {}
        self.search_calls: list[dict[str, Any]] = []
        self.lookup_calls: list[tuple[str, list[str]]] = []

    @property
    def name(self) -> str:
        return "stub"

    async def initialize(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    async def fuzzy_search(self, collection: str, field: str, query: str, max_edits: int, limit: int) -> RawResults:
        self.search_calls.append(
            {"collection": collection, "field": field, "query": query, "max_edits": max_edits, "limit": limit}
        )
        if collection in self.failures:
            raise self.failures[collection]
        hits = [IndexHit(document=doc, score=score) for doc, score in self.hits.get(collection, [])]
        return RawResults(total_hits=len(hits), hits=hits[:limit])

    async def lookup(self, collection: str, ids: list[str]) -> list[dict[str, Any]]:
        self.lookup_calls.append((collection, list(ids)))
        wanted = set(ids)
        return [doc for doc in self.documents.get(collection, []) if document_id(doc) in wanted]

    async def health_check(self) -> AdapterHealth:
        return AdapterHealth(status="healthy", message="stub")


# ── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        observability={"log_level": "debug", "log_format": "console"},
    )


@pytest.fixture
def builders() -> dict[str, Callable[..., dict]]:
    """Catalog document builders: ``album``, ``artist``, ``song``."""
    return {"album": make_album, "artist": make_artist, "song": make_song}


@pytest.fixture
def stub_client_factory() -> type[StubIndexClient]:
    return StubIndexClient


@pytest.fixture
def beatles_catalog() -> StubIndexClient:
    """Catalog where "Beatles" hits an album at 9.2, a song at 9.5, and an artist at 8.0.

    The second song points at an album that does not exist, and the first
    song credits one artist that does not exist.
    """
    white_album = make_album("a1", "The Beatles (White Album)", release="1968-11-22T00:00:00Z", label_id="l1")
    for_sale = make_album("a2", "Beatles for Sale", release="1964-12-04T00:00:00Z")
    the_beatles = make_artist("ar1", "The Beatles")
    revival = make_artist("ar2", "Beatles Revival Band")
    medley = make_song("s1", "Beatles Medley", "a1", ["ar1", "ar-missing"])
    orphan = make_song("s2", "Beatles Bootleg", "a-missing", ["ar1"])

    return StubIndexClient(
        hits={
            "Album": [(white_album, 9.2), (for_sale, 7.1)],
            "Song": [(medley, 9.5), (orphan, 6.0)],
            "Artist": [(the_beatles, 8.0), (revival, 5.5)],
        },
        documents={
            "Album": [white_album, for_sale],
            "Artist": [the_beatles, revival],
        },
    )
