"""Adapter-specific exceptions.

Every failure of the search backend surfaces as a ``SearchBackendError``
subclass so callers can fail the whole request with a single ``except``.
"""


class SearchBackendError(Exception):
    """Base exception for search backend errors."""


class BackendConnectionError(SearchBackendError):
    """Raised when the adapter cannot connect to the search backend."""


class QueryError(SearchBackendError):
    """Raised when a search or lookup fails or returns data that cannot be parsed."""


class ConfigurationError(SearchBackendError):
    """Raised when adapter configuration is invalid."""
