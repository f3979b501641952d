"""Exceptions raised by the graph core and the scoring layer."""


class GraphError(Exception):
    """Base exception for graph construction errors."""

    def __init__(self, message: str, code: str = "GRAPH_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code


class InvalidEntityError(GraphError):
    """An entity or its sentiment vector is malformed."""

    def __init__(self, message: str, entity_id: str | None = None):
        super().__init__(message, code="INVALID_ENTITY")
        self.entity_id = entity_id


class ExternalAPIError(Exception):
    """Base exception for external API errors."""

    def __init__(
        self,
        message: str,
        code: str = "EXTERNAL_API_ERROR",
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class RateLimitError(ExternalAPIError):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, message: str, retry_after: int = 60):
        super().__init__(message, code="RATE_LIMITED", status_code=429)
        self.retry_after = retry_after
