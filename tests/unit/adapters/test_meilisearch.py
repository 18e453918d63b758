"""Tests for the MeiliSearch adapter."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from catalogsearch.adapters.base.exceptions import BackendConnectionError, QueryError
from catalogsearch.adapters.meilisearch.adapter import MeiliSearchAdapter

# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def adapter() -> MeiliSearchAdapter:
    return MeiliSearchAdapter(base_url="http://localhost:7700/", api_key="test-key")


@pytest.fixture
def sample_meili_response() -> dict[str, Any]:
    """Sample MeiliSearch search response for the album index."""
    return {
        "hits": [
            {
                "id": "a1",
                "name": "Abbey Road",
                "image": "https://img.example.com/a1.jpg",
                "color": "#ffffff",
                "release": "1969-09-26T00:00:00Z",
                "_rankingScore": 0.92,
                "_formatted": {"name": "<em>Abbey</em> Road"},
            },
            {"id": "a2", "name": "Abbey Road Live", "_rankingScore": 0.61},
        ],
        "estimatedTotalHits": 2,
        "offset": 0,
        "limit": 5,
        "processingTimeMs": 1,
        "query": "abey road",
    }


def _response(payload: Any, status_code: int = 200) -> MagicMock:
    response = MagicMock(spec=httpx.Response)
    response.status_code = status_code
    response.json.return_value = payload
    response.raise_for_status = lambda: None
    return response


def _client_returning(response: MagicMock) -> AsyncMock:
    client = AsyncMock(spec=httpx.AsyncClient)
    client.post.return_value = response
    client.get.return_value = response
    return client


# ── Properties ───────────────────────────────────────────────────────────────


class TestMeiliSearchProperties:
    def test_name(self, adapter: MeiliSearchAdapter) -> None:
        assert adapter.name == "meilisearch"

    def test_trailing_slash_stripped(self, adapter: MeiliSearchAdapter) -> None:
        assert adapter._base_url == "http://localhost:7700"

    def test_defaults(self) -> None:
        a = MeiliSearchAdapter()
        assert a._base_url == "http://localhost:7700"
        assert a._api_key is None


# ── Search ───────────────────────────────────────────────────────────────────


class TestMeiliSearchFuzzySearch:
    async def test_not_initialized_raises(self, adapter: MeiliSearchAdapter) -> None:
        with pytest.raises(BackendConnectionError, match="not initialized"):
            await adapter.fuzzy_search("Album", "name", "abbey", 2, 5)

    async def test_request_payload(self, adapter: MeiliSearchAdapter, sample_meili_response: dict) -> None:
        adapter._client = _client_returning(_response(sample_meili_response))

        await adapter.fuzzy_search("Album", "name", "abey road", 2, 5)

        adapter._client.post.assert_awaited_once()
        path = adapter._client.post.call_args.args[0]
        payload = adapter._client.post.call_args.kwargs["json"]
        assert path == "/indexes/Album/search"
        assert payload["q"] == "abey road"
        assert payload["limit"] == 5
        assert payload["attributesToSearchOn"] == ["name"]
        assert payload["showRankingScore"] is True

    async def test_hits_carry_ranking_score(self, adapter: MeiliSearchAdapter, sample_meili_response: dict) -> None:
        adapter._client = _client_returning(_response(sample_meili_response))

        results = await adapter.fuzzy_search("Album", "name", "abey road", 2, 5)

        assert results.total_hits == 2
        assert [hit.score for hit in results.hits] == [0.92, 0.61]
        assert results.hits[0].document["id"] == "a1"
        assert not any(key.startswith("_") for key in results.hits[0].document)

    async def test_hit_without_score_is_malformed(self, adapter: MeiliSearchAdapter) -> None:
        adapter._client = _client_returning(_response({"hits": [{"id": "a1", "name": "X"}]}))

        with pytest.raises(QueryError, match="ranking score"):
            await adapter.fuzzy_search("Album", "name", "x", 2, 5)

    async def test_http_error(self, adapter: MeiliSearchAdapter) -> None:
        response = MagicMock(spec=httpx.Response)
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Bad Request",
            request=httpx.Request("POST", "http://test"),
            response=httpx.Response(400),
        )
        adapter._client = _client_returning(response)

        with pytest.raises(QueryError, match="MeiliSearch query failed"):
            await adapter.fuzzy_search("Album", "name", "x", 2, 5)

    @pytest.mark.parametrize("payload", [["a1"], "ok", {"hits": "none"}, {"hits": ["a1"]}])
    async def test_unexpected_response_shape(self, adapter: MeiliSearchAdapter, payload: Any) -> None:
        adapter._client = _client_returning(_response(payload))

        with pytest.raises(QueryError):
            await adapter.fuzzy_search("Album", "name", "x", 2, 5)

    async def test_invalid_json(self, adapter: MeiliSearchAdapter) -> None:
        response = _response(None)
        response.json.side_effect = ValueError("Expecting value")
        adapter._client = _client_returning(response)

        with pytest.raises(QueryError, match="invalid JSON"):
            await adapter.fuzzy_search("Album", "name", "x", 2, 5)


# ── Lookup ───────────────────────────────────────────────────────────────────


class TestMeiliSearchLookup:
    async def test_empty_ids_skip_request(self, adapter: MeiliSearchAdapter) -> None:
        adapter._client = AsyncMock(spec=httpx.AsyncClient)
        assert await adapter.lookup("Album", []) == []
        adapter._client.post.assert_not_called()

    async def test_filter_by_ids(self, adapter: MeiliSearchAdapter) -> None:
        adapter._client = _client_returning(_response({"results": [{"id": "a1", "name": "Abbey Road"}]}))

        docs = await adapter.lookup("Album", ["a1", "a9"])

        assert docs == [{"id": "a1", "name": "Abbey Road"}]
        path = adapter._client.post.call_args.args[0]
        payload = adapter._client.post.call_args.kwargs["json"]
        assert path == "/indexes/Album/documents/fetch"
        assert payload["filter"] == 'id IN ["a1", "a9"]'
        assert payload["limit"] == 2

    @pytest.mark.parametrize("payload", [[{"id": "a1"}], "ok", {"results": {"id": "a1"}}])
    async def test_unexpected_response_shape(self, adapter: MeiliSearchAdapter, payload: Any) -> None:
        adapter._client = _client_returning(_response(payload))

        with pytest.raises(QueryError, match="unexpected documents response"):
            await adapter.lookup("Album", ["a1"])

    async def test_transport_error(self, adapter: MeiliSearchAdapter) -> None:
        client = AsyncMock(spec=httpx.AsyncClient)
        client.post.side_effect = httpx.ConnectError("refused")
        adapter._client = client

        with pytest.raises(QueryError, match="Failed to fetch documents"):
            await adapter.lookup("Album", ["a1"])


# ── Health ───────────────────────────────────────────────────────────────────


class TestMeiliSearchHealth:
    async def test_health_not_initialized(self, adapter: MeiliSearchAdapter) -> None:
        health = await adapter.health_check()
        assert health.status == "unhealthy"

    async def test_health_available(self, adapter: MeiliSearchAdapter) -> None:
        adapter._client = _client_returning(_response({"status": "available"}))

        health = await adapter.health_check()

        assert health.status == "healthy"
        assert health.last_check is not None

    async def test_health_non_200(self, adapter: MeiliSearchAdapter) -> None:
        adapter._client = _client_returning(_response({}, status_code=503))

        health = await adapter.health_check()

        assert health.status == "degraded"
        assert "503" in (health.message or "")

    async def test_health_exception(self, adapter: MeiliSearchAdapter) -> None:
        client = AsyncMock(spec=httpx.AsyncClient)
        client.get.side_effect = RuntimeError("Connection refused")
        adapter._client = client

        health = await adapter.health_check()
        assert health.status == "unhealthy"

    async def test_shutdown_closes_client(self, adapter: MeiliSearchAdapter) -> None:
        client = AsyncMock(spec=httpx.AsyncClient)
        adapter._client = client

        await adapter.shutdown()

        client.aclose.assert_awaited_once()
        assert adapter._client is None
