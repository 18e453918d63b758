"""Search endpoints — Unified and single-kind catalog search.

Every endpoint takes a single required ``q`` query parameter and always
answers with the ``{status, message, data}`` envelope:

- ``GET /search``          — albums, songs, and artists plus a ``topResult``
- ``GET /search/albums``   — albums only, relative cutoff 0.5, up to 20
- ``GET /search/songs``    — enriched songs only, relative cutoff 0.5, up to 20
- ``GET /search/artists``  — artists only, relative cutoff 0.75, up to 20
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from catalogsearch.api.deps import get_cache, get_engine
from catalogsearch.cache.manager import CacheManager, search_cache_key
from catalogsearch.core.engine import CatalogSearchEngine
from catalogsearch.core.exceptions import QueryValidationError
from catalogsearch.models.catalog import CatalogRecord
from catalogsearch.models.response import (
    AlbumSearchData,
    ArtistSearchData,
    Envelope,
    SongSearchData,
    UnifiedSearchData,
    bad_request_envelope,
    internal_error_envelope,
    success_envelope,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": Envelope[dict[str, str]], "description": "Missing or empty `q` parameter"},
    500: {"model": Envelope[dict[str, Any]], "description": "Search backend failure; no details are exposed"},
}

SearchQuery = Annotated[str | None, Query(description="Free-text search query (required, non-empty)")]


async def _respond(
    endpoint: str,
    query: str | None,
    operation: Callable[[str | None], Awaitable[CatalogRecord]],
    cache: CacheManager,
) -> JSONResponse:
    """Run one search operation and wrap the outcome in the envelope."""
    cache_key = search_cache_key(endpoint, query) if query else None
    if cache_key:
        cached = await cache.get(cache_key)
        if cached is not None:
            return JSONResponse(cached)

    try:
        data = await operation(query)
    except QueryValidationError:
        return JSONResponse(bad_request_envelope(), status_code=400)
    except Exception:
        logger.error("Search %s failed for query %r", endpoint, query, exc_info=True)
        return JSONResponse(internal_error_envelope(), status_code=500)

    body = success_envelope(data)
    if cache_key:
        await cache.set(cache_key, body)
    return JSONResponse(body)


@router.get(
    "/search",
    response_model=Envelope[UnifiedSearchData],
    summary="Unified Catalog Search",
    description=(
        "Fuzzy-search albums, songs, and artists at once. Returns the top five of each kind "
        "and a single `topResult`: the first-place hit of the best-scoring kind "
        "(ties go to albums, then songs, then artists)."
    ),
    responses=_ERROR_RESPONSES,
)
async def search(
    q: SearchQuery = None,
    engine: CatalogSearchEngine = Depends(get_engine),
    cache: CacheManager = Depends(get_cache),
) -> JSONResponse:
    return await _respond("all", q, engine.search, cache)


@router.get(
    "/search/albums",
    response_model=Envelope[AlbumSearchData],
    summary="Album Search",
    description="Albums scoring at least half of the best album match (up to 20).",
    responses=_ERROR_RESPONSES,
)
async def search_albums(
    q: SearchQuery = None,
    engine: CatalogSearchEngine = Depends(get_engine),
    cache: CacheManager = Depends(get_cache),
) -> JSONResponse:
    return await _respond("albums", q, engine.search_albums, cache)


@router.get(
    "/search/songs",
    response_model=Envelope[SongSearchData],
    summary="Song Search",
    description=(
        "Songs scoring at least half of the best song match (up to 20), each with its album "
        "and artists resolved. Songs whose album cannot be resolved are left out."
    ),
    responses=_ERROR_RESPONSES,
)
async def search_songs(
    q: SearchQuery = None,
    engine: CatalogSearchEngine = Depends(get_engine),
    cache: CacheManager = Depends(get_cache),
) -> JSONResponse:
    return await _respond("songs", q, engine.search_songs, cache)


@router.get(
    "/search/artists",
    response_model=Envelope[ArtistSearchData],
    summary="Artist Search",
    description="Artists scoring at least three quarters of the best artist match (up to 20).",
    responses=_ERROR_RESPONSES,
)
async def search_artists(
    q: SearchQuery = None,
    engine: CatalogSearchEngine = Depends(get_engine),
    cache: CacheManager = Depends(get_cache),
) -> JSONResponse:
    return await _respond("artists", q, engine.search_artists, cache)
