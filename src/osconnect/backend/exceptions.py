"""Backend operation exceptions."""


class BackendError(Exception):
    """Base exception for search backend errors."""


class IndexingError(BackendError):
    """Raised when an index or item operation is rejected by the cluster."""


class QueryError(BackendError):
    """Raised when a search query fails."""
