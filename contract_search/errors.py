"""Typed failures raised by the search engine and saved-search service.

Each error carries enough context for the caller to decide what to do next:
the offending parameter for validation failures, the originating collection
for upstream failures.
"""


class SearchError(Exception):
    """Base class for all search service errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class SearchValidationError(SearchError):
    """Malformed input: no work has been performed."""

    status_code = 400

    def __init__(self, parameter: str, message: str):
        super().__init__(message)
        self.parameter = parameter

    def to_dict(self) -> dict:
        return {"error": self.message, "parameter": self.parameter}


class UpstreamFetchError(SearchError):
    """The record store failed during a required read. Safe to retry."""

    status_code = 502

    def __init__(self, collection: str, cause: Exception | None = None):
        detail = f": {str(cause)[:200]}" if cause else ""
        super().__init__(f"Failed to fetch from '{collection}'{detail}")
        self.collection = collection
        self.cause = cause

    def to_dict(self) -> dict:
        return {"error": self.message, "collection": self.collection, "retryable": True}


class DuplicateNameError(SearchError):
    """A saved search with the same name already exists for this user."""

    status_code = 409

    def __init__(self, name: str):
        super().__init__("A saved search with this name already exists")
        self.name = name


class UnauthorizedError(SearchError):
    """The requesting user does not own the target entry."""

    status_code = 403

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(SearchError):
    """The target entry does not exist."""

    status_code = 404
