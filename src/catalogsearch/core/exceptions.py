"""Core exceptions."""


class QueryValidationError(ValueError):
    """Raised when the search query is missing or empty.

    The API layer maps it to a client error; it never reaches the backend.
    """

    def __init__(self, field: str = "query", detail: str = "Query parameter is required") -> None:
        super().__init__(detail)
        self.field = field
        self.detail = detail


def validate_query(query: str | None) -> str:
    """Return ``query`` unchanged, or raise if it is missing or empty."""
    if not query:
        raise QueryValidationError()
    return query
