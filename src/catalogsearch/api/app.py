"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import importlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalogsearch import __version__
from catalogsearch.api.deps import set_cache, set_engine
from catalogsearch.api.health import router as health_router
from catalogsearch.api.v3.router import router as v3_router
from catalogsearch.cache.manager import CacheManager
from catalogsearch.config.settings import AdapterConfig, Settings
from catalogsearch.core.engine import CatalogSearchEngine
from catalogsearch.observability.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from
            ``catalogsearch-config.yaml`` when present, else from the environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        yaml_path = Path("catalogsearch-config.yaml")
        settings = Settings.from_yaml(yaml_path) if yaml_path.exists() else Settings()

    setup_logging(settings.observability)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        logger.info("Starting catalog search v%s", __version__)

        engine = CatalogSearchEngine(settings)
        await _register_adapters(engine, settings)
        cache = CacheManager(settings.cache)
        await cache.initialize()

        set_engine(engine)
        set_cache(cache)
        app.state.settings = settings
        app.state.engine = engine

        logger.info("Catalog search is ready to serve requests on port %d", settings.server.port)
        yield

        logger.info("Shutting down catalog search...")
        await engine.shutdown()
        await cache.shutdown()
        set_engine(None)
        set_cache(None)
        logger.info("Catalog search shutdown complete")

    app = FastAPI(
        title="Catalog Search",
        description="Fuzzy search over the album, song, and artist catalog.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(v3_router, prefix="/v3")
    app.include_router(health_router)

    return app


# ── Adapter auto-registration ──

# Maps adapter names to (module_path, class_name) for lazy import
_ADAPTER_MAP: dict[str, tuple[str, str]] = {
    "opensearch": ("catalogsearch.adapters.opensearch.adapter", "OpenSearchAdapter"),
    "meilisearch": ("catalogsearch.adapters.meilisearch.adapter", "MeiliSearchAdapter"),
}


def _adapter_kwargs(adapter_name: str, adapter_cfg: AdapterConfig) -> dict[str, Any]:
    """Translate an ``AdapterConfig`` into constructor keyword arguments."""
    kwargs: dict[str, Any] = {}
    if adapter_cfg.hosts:
        if adapter_name == "meilisearch":
            kwargs["base_url"] = adapter_cfg.hosts[0]
        else:
            kwargs["hosts"] = adapter_cfg.hosts
    if adapter_cfg.api_key:
        kwargs["api_key"] = adapter_cfg.api_key
    if adapter_cfg.username:
        kwargs["username"] = adapter_cfg.username
    if adapter_cfg.password:
        kwargs["password"] = adapter_cfg.password
    kwargs.update(adapter_cfg.extra)
    return kwargs


async def _register_adapters(engine: CatalogSearchEngine, settings: Settings) -> None:
    """Register and initialise the enabled adapters declared in settings."""
    for adapter_name, adapter_cfg in settings.search.adapters.items():
        if not adapter_cfg.enabled:
            logger.info("Adapter '%s' is disabled, skipping", adapter_name)
            continue

        entry = _ADAPTER_MAP.get(adapter_name)
        if entry is None:
            logger.warning("Unknown adapter '%s'; no built-in class found", adapter_name)
            continue

        module_path, class_name = entry
        adapter_class = getattr(importlib.import_module(module_path), class_name)

        engine.adapter_registry.register(adapter_name, adapter_class)
        try:
            await engine.adapter_registry.initialize_adapter(adapter_name, **_adapter_kwargs(adapter_name, adapter_cfg))
        except Exception:
            logger.warning("Failed to initialise adapter '%s'", adapter_name, exc_info=True)

    if settings.search.default_adapter not in engine.adapter_registry.active_adapters:
        logger.error(
            "Default adapter '%s' is not active; search requests will fail",
            settings.search.default_adapter,
        )
