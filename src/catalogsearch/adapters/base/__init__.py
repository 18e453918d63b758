"""Base adapter interface — Abstract classes for search engine connectors."""

from catalogsearch.adapters.base.adapter import SearchIndexClient
from catalogsearch.adapters.base.registry import AdapterRegistry

__all__ = ["AdapterRegistry", "SearchIndexClient"]
