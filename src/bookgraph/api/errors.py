"""
Unified error handling for consistent API error responses.

All API errors share one response format:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human-readable message",
        "detail": "Optional additional context"
    }
}
"""

from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from ..core.errors import ExternalAPIError, InvalidEntityError


class APIError(HTTPException):
    """Base API error class for consistent error responses."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        detail: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.code = code
        self.message = message
        self.error_detail = detail
        super().__init__(
            status_code=status_code,
            detail={"code": code, "message": message, "detail": detail},
            headers=headers,
        )


class NotFoundError(APIError):
    """Resource not found (404)."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            status_code=404,
            code="NOT_FOUND",
            message=f"{resource} not found",
            detail=f"{resource} {identifier}",
        )


class ValidationError(APIError):
    """Invalid input (400)."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            status_code=400,
            code="VALIDATION_ERROR",
            message=message,
            detail=detail,
        )


class ServiceUnavailableError(APIError):
    """External service unavailable (503)."""

    def __init__(self, service: str, message: str | None = None):
        super().__init__(
            status_code=503,
            code="SERVICE_UNAVAILABLE",
            message=message or f"{service} is currently unavailable",
            detail=f"The {service} service is not configured or experiencing issues",
        )


def _render(exc: APIError) -> JSONResponse:
    content = {
        "error": {
            "code": exc.code,
            "message": exc.message,
        }
    }
    if exc.error_detail:
        content["error"]["detail"] = exc.error_detail

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=exc.headers,
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Convert APIError exceptions to consistent JSON responses."""
    return _render(exc)


async def invalid_entity_handler(request: Request, exc: InvalidEntityError) -> JSONResponse:
    """Malformed books or sentiment scores are client errors."""
    detail = f"Book {exc.entity_id}" if exc.entity_id else None
    return _render(ValidationError(exc.message, detail=detail))


async def external_api_handler(request: Request, exc: ExternalAPIError) -> JSONResponse:
    """Scoring backend failures surface as 503 or 502."""
    if exc.code == "SERVICE_UNAVAILABLE":
        return _render(ServiceUnavailableError("scoring", exc.message))
    return _render(
        APIError(
            status_code=502,
            code=exc.code,
            message=exc.message,
            detail="Error from scoring API",
        )
    )
