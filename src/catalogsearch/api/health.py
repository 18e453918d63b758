"""Health check endpoints — Service and adapter health monitoring."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from catalogsearch import __version__
from catalogsearch.adapters.base.adapter import AdapterHealth
from catalogsearch.api.deps import get_engine
from catalogsearch.core.engine import CatalogSearchEngine

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = Field(description="Health status (always 'healthy' while serving)")
    service: str = Field(description="Service name")
    version: str = Field(description="Service version")


class AdapterHealthResponse(BaseModel):
    """Per-adapter health check response."""

    default_adapter: str = Field(description="Adapter used for catalog search")
    adapters: dict[str, AdapterHealth] = Field(description="Map of adapter name to its health status")


@router.get("/health", response_model=HealthResponse, summary="Service Health Check")
async def health_check(engine: CatalogSearchEngine = Depends(get_engine)) -> HealthResponse:
    """Liveness probe; does not touch the search backend."""
    return HealthResponse(status="healthy", service=engine.settings.app_name, version=__version__)


@router.get("/health/adapters", response_model=AdapterHealthResponse, summary="Adapter Health Check")
async def adapter_health(engine: CatalogSearchEngine = Depends(get_engine)) -> AdapterHealthResponse:
    """Run health checks on every active search adapter."""
    return AdapterHealthResponse(
        default_adapter=engine.settings.search.default_adapter,
        adapters=await engine.adapter_registry.health_check_all(),
    )
