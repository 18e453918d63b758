"""API v3 Router — Catalog search endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from catalogsearch.api.v3.endpoints.search import router as search_router

router = APIRouter(tags=["v3"])
router.include_router(search_router)
