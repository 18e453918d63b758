"""Adapter registry — Tracks search index client classes and live instances.

Adapter classes are registered by name; instances are created from
configuration during application startup and shared by every request.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from catalogsearch.adapters.base.adapter import AdapterHealth, SearchIndexClient

logger = logging.getLogger(__name__)


class AdapterNotFoundError(Exception):
    """Raised when a requested adapter is not registered or not initialized."""


class AdapterRegistry:
    """Registry of search index client classes and their initialized instances.

    Example:
        >>> registry = AdapterRegistry()
        >>> registry.register("opensearch", OpenSearchAdapter)
        >>> await registry.initialize_adapter("opensearch", hosts=["https://localhost:9200"])
        >>> client = registry.get("opensearch")
    """

    def __init__(self) -> None:
        self._classes: dict[str, type[SearchIndexClient]] = {}
        self._instances: dict[str, SearchIndexClient] = {}

    def register(self, name: str, adapter_class: type[SearchIndexClient]) -> None:
        """Register an adapter class under ``name``."""
        if name in self._classes:
            logger.warning("Overwriting existing adapter registration: %s", name)
        self._classes[name] = adapter_class
        logger.info("Registered adapter: %s", name)

    def add_instance(self, adapter: SearchIndexClient) -> None:
        """Add an already initialized adapter under its own name."""
        self._instances[adapter.name] = adapter

    async def initialize_adapter(self, name: str, **kwargs: Any) -> SearchIndexClient:
        """Create and initialize an instance of a registered adapter class.

        Args:
            name: The registered adapter name.
            **kwargs: Configuration passed to the adapter constructor.

        Returns:
            The initialized adapter instance.

        Raises:
            AdapterNotFoundError: If no adapter class is registered under ``name``.
        """
        adapter_class = self._classes.get(name)
        if adapter_class is None:
            raise AdapterNotFoundError(
                f"No adapter registered with name '{name}'. "
                f"Available adapters: {sorted(self._classes)}"
            )

        adapter = adapter_class(**kwargs)
        await adapter.initialize()
        self._instances[name] = adapter
        logger.info("Initialized adapter: %s", name)
        return adapter

    def get(self, name: str) -> SearchIndexClient:
        """Return the initialized adapter registered under ``name``.

        Raises:
            AdapterNotFoundError: If the adapter is not initialized.
        """
        try:
            return self._instances[name]
        except KeyError:
            raise AdapterNotFoundError(
                f"Adapter '{name}' is not initialized. Active adapters: {self.active_adapters}"
            ) from None

    async def health_check_all(self) -> dict[str, AdapterHealth]:
        """Run health checks on all initialized adapters concurrently."""
        names = list(self._instances)
        outcomes = await asyncio.gather(
            *(self._instances[name].health_check() for name in names),
            return_exceptions=True,
        )
        results: dict[str, AdapterHealth] = {}
        for name, outcome in zip(names, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                results[name] = AdapterHealth(status="unhealthy", message=str(outcome))
            else:
                results[name] = outcome
        return results

    async def shutdown_all(self) -> None:
        """Shut down every initialized adapter; failures are logged, not raised."""
        for name, adapter in self._instances.items():
            try:
                await adapter.shutdown()
                logger.info("Shut down adapter: %s", name)
            except Exception:
                logger.warning("Error shutting down adapter: %s", name, exc_info=True)
        self._instances.clear()

    @property
    def registered_adapters(self) -> list[str]:
        """Names of all registered adapter classes."""
        return list(self._classes)

    @property
    def active_adapters(self) -> list[str]:
        """Names of all initialized adapters."""
        return list(self._instances)
