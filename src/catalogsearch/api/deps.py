"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from catalogsearch.cache.manager import CacheManager
from catalogsearch.core.engine import CatalogSearchEngine

# Global instances (set during application lifespan)
_engine: CatalogSearchEngine | None = None
_cache: CacheManager | None = None


def set_engine(engine: CatalogSearchEngine | None) -> None:
    """Set the global engine instance (called during app lifespan)."""
    global _engine
    _engine = engine


def get_engine() -> CatalogSearchEngine:
    """Get the global catalog search engine.

    Raises:
        RuntimeError: If the engine is not initialized.
    """
    if _engine is None:
        raise RuntimeError("Catalog search engine not initialized. Is the server running?")
    return _engine


def set_cache(cache: CacheManager | None) -> None:
    """Set the global response cache (called during app lifespan)."""
    global _cache
    _cache = cache


def get_cache() -> CacheManager:
    """Get the global response cache.

    Raises:
        RuntimeError: If the cache is not initialized.
    """
    if _cache is None:
        raise RuntimeError("Response cache not initialized. Is the server running?")
    return _cache
