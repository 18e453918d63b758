"""Tests for the v3 search endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from catalogsearch.adapters.base.exceptions import BackendConnectionError
from catalogsearch.api.app import create_app
from catalogsearch.api.deps import set_cache, set_engine
from catalogsearch.cache.manager import CacheManager
from catalogsearch.config.settings import CacheSettings, Settings
from catalogsearch.core.engine import CatalogSearchEngine


@pytest.fixture
def client(settings: Settings, beatles_catalog) -> TestClient:
    """Create a test client backed by the in-memory Beatles catalog."""
    app = create_app(settings)
    set_engine(CatalogSearchEngine(settings, client=beatles_catalog))
    set_cache(CacheManager(CacheSettings(enabled=False)))
    yield TestClient(app)
    set_engine(None)
    set_cache(None)


# ── Unified search ───────────────────────────────────────────────────────────


class TestUnifiedSearch:
    def test_envelope(self, client: TestClient) -> None:
        response = client.get("/v3/search", params={"q": "Beatles"})

        assert response.status_code == 200
        body = response.json()
        assert list(body) == ["status", "message", "data"]
        assert body["status"] is True
        assert body["message"] == "Search results"
        assert set(body["data"]) == {"query", "topResult", "albums", "songs", "artists"}
        assert body["data"]["query"] == "Beatles"

    def test_top_result_is_the_best_song(self, client: TestClient) -> None:
        data = client.get("/v3/search", params={"q": "Beatles"}).json()["data"]

        assert data["topResult"] == data["songs"][0]
        assert data["topResult"]["name"] == "Beatles Medley"

    def test_album_json(self, client: TestClient) -> None:
        album = client.get("/v3/search", params={"q": "Beatles"}).json()["data"]["albums"][0]

        assert album == {
            "id": "a1",
            "name": "The Beatles (White Album)",
            "image": "https://img.example.com/albums/a1.jpg",
            "color": "#1f1f1f",
            "release": "1968-11-22T00:00:00.000Z",
            "labelId": "l1",
        }

    def test_album_without_label_has_null_label(self, client: TestClient) -> None:
        albums = client.get("/v3/search", params={"q": "Beatles"}).json()["data"]["albums"]
        assert albums[1]["labelId"] is None

    def test_artists_are_blanked(self, client: TestClient) -> None:
        artist = client.get("/v3/search", params={"q": "Beatles"}).json()["data"]["artists"][0]

        assert artist["thumbnail"] is None
        assert artist["about"] == ""
        assert artist["songIds"] == []
        assert artist["followerIds"] == []

    def test_song_json(self, client: TestClient) -> None:
        song = client.get("/v3/search", params={"q": "Beatles"}).json()["data"]["songs"][0]

        assert song["albumId"] == "a1"
        assert song["artistIds"] == ["ar1", "ar-missing"]
        assert song["album"]["id"] == "a1"
        assert song["artists"] == [
            {"id": "ar1", "name": "The Beatles", "image": "https://img.example.com/artists/ar1.jpg"}
        ]


# ── Single-kind search ───────────────────────────────────────────────────────


class TestScopedSearch:
    def test_albums(self, client: TestClient) -> None:
        body = client.get("/v3/search/albums", params={"q": "Beatles"}).json()

        assert body["status"] is True
        assert set(body["data"]) == {"query", "albums"}
        assert [a["id"] for a in body["data"]["albums"]] == ["a1", "a2"]

    def test_songs(self, client: TestClient) -> None:
        body = client.get("/v3/search/songs", params={"q": "Beatles"}).json()

        assert set(body["data"]) == {"query", "songs"}
        assert [s["id"] for s in body["data"]["songs"]] == ["s1"]

    def test_artists_use_summary_shape(self, client: TestClient) -> None:
        body = client.get("/v3/search/artists", params={"q": "Beatles"}).json()

        # 5.5 < 0.75 * 8.0, so only the best artist survives
        assert body["data"]["artists"] == [
            {"id": "ar1", "name": "The Beatles", "image": "https://img.example.com/artists/ar1.jpg"}
        ]


# ── Errors ───────────────────────────────────────────────────────────────────


class TestErrors:
    @pytest.mark.parametrize("path", ["/v3/search", "/v3/search/albums", "/v3/search/songs", "/v3/search/artists"])
    @pytest.mark.parametrize("params", [{}, {"q": ""}])
    def test_missing_query(self, client: TestClient, beatles_catalog, path: str, params: dict) -> None:
        response = client.get(path, params=params)

        assert response.status_code == 400
        assert response.json() == {
            "status": False,
            "message": "Bad Request",
            "data": {"query": "Query parameter is required"},
        }
        assert beatles_catalog.search_calls == []

    @pytest.mark.parametrize("path", ["/v3/search", "/v3/search/albums", "/v3/search/songs", "/v3/search/artists"])
    def test_backend_failure(self, client: TestClient, beatles_catalog, path: str) -> None:
        for collection in ("Album", "Song", "Artist"):
            beatles_catalog.failures[collection] = BackendConnectionError("connection refused to 10.0.0.7")

        response = client.get(path, params={"q": "Beatles"})

        assert response.status_code == 500
        assert response.json() == {"status": False, "message": "Internal Server Error", "data": {}}
        assert "10.0.0.7" not in response.text

    def test_malformed_document_is_a_server_error(self, client: TestClient, beatles_catalog) -> None:
        del beatles_catalog.hits["Album"][0][0]["color"]

        response = client.get("/v3/search/albums", params={"q": "Beatles"})

        assert response.status_code == 500


# ── Response cache ───────────────────────────────────────────────────────────


class TestResponseCache:
    @pytest.fixture
    def cached_client(self, settings: Settings, beatles_catalog) -> TestClient:
        app = create_app(settings)
        set_engine(CatalogSearchEngine(settings, client=beatles_catalog))
        set_cache(CacheManager(CacheSettings(enabled=True, backend="memory")))
        yield TestClient(app)
        set_engine(None)
        set_cache(None)

    def test_repeat_query_is_served_from_cache(self, cached_client: TestClient, beatles_catalog) -> None:
        first = cached_client.get("/v3/search/albums", params={"q": "Beatles"}).json()
        calls = len(beatles_catalog.search_calls)

        second = cached_client.get("/v3/search/albums", params={"q": "Beatles"}).json()

        assert second == first
        assert len(beatles_catalog.search_calls) == calls

    def test_endpoints_do_not_share_entries(self, cached_client: TestClient) -> None:
        albums = cached_client.get("/v3/search/albums", params={"q": "Beatles"}).json()
        artists = cached_client.get("/v3/search/artists", params={"q": "Beatles"}).json()
        assert albums["data"] != artists["data"]

    def test_errors_are_not_cached(self, cached_client: TestClient, beatles_catalog) -> None:
        beatles_catalog.failures["Album"] = BackendConnectionError("down")
        assert cached_client.get("/v3/search/albums", params={"q": "Beatles"}).status_code == 500

        del beatles_catalog.failures["Album"]
        assert cached_client.get("/v3/search/albums", params={"q": "Beatles"}).status_code == 200

    def test_cache_fault_falls_through_to_search(self, settings: Settings, beatles_catalog) -> None:
        app = create_app(settings)
        cache = CacheManager(CacheSettings(enabled=True))
        cache._memory_cache = MagicMock()
        cache._memory_cache.get.side_effect = RuntimeError("cache down")
        set_engine(CatalogSearchEngine(settings, client=beatles_catalog))
        set_cache(cache)
        try:
            response = TestClient(app).get("/v3/search/albums", params={"q": "Beatles"})
        finally:
            set_engine(None)
            set_cache(None)

        assert response.status_code == 200
