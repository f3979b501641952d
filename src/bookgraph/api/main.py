"""
FastAPI application serving book and category similarity graphs.

Responses are encoded with msgspec; every failure, including unexpected
ones, is returned in the {"error": {...}} envelope from api.errors.

Run with:
    uvicorn bookgraph.api.main:app --reload
    bookgraph serve --port 8000
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import msgspec
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from .errors import (
    APIError,
    api_error_handler,
    external_api_handler,
    invalid_entity_handler,
)
from .routers import graph
from ..core.config import Settings, get_settings
from ..core.errors import ExternalAPIError, InvalidEntityError
from ..services.graph import get_graph_service

logger = logging.getLogger(__name__)


class MSGSpecResponse(Response):
    """JSON response encoded with msgspec."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        if content is None:
            return b""
        return msgspec.json.encode(content)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release the scoring client's connections on shutdown."""
    logger.info("Bookgraph API starting")
    yield
    try:
        await get_graph_service().close()
    except Exception as e:
        logger.warning("Scoring client did not close cleanly: %s", e)
    logger.info("Bookgraph API stopped")


def _add_middleware(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Accept", "Accept-Encoding", "Content-Type"],
        expose_headers=["X-Process-Time"],
    )
    # Large book graphs compress well
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def process_time_header(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Process-Time"] = f"{(time.perf_counter() - started) * 1000:.2f}ms"
        return response


def _add_error_handlers(app: FastAPI, settings: Settings) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(InvalidEntityError, invalid_entity_handler)
    app.add_exception_handler(ExternalAPIError, external_api_handler)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        expose = settings.debug and settings.environment != "production"
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An internal error occurred",
                    "detail": str(exc) if expose else None,
                }
            },
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the Bookgraph API.

    Args:
        settings: Settings to use (defaults to the cached settings)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Thematic similarity graphs over sentiment-scored books",
        version=settings.app_version,
        default_response_class=MSGSpecResponse,
        docs_url=settings.api_docs_url,
        redoc_url=settings.api_redoc_url,
        lifespan=lifespan,
    )

    _add_middleware(app, settings)
    _add_error_handlers(app, settings)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "healthy", "timestamp": datetime.now(tz=timezone.utc).isoformat()}

    @app.get("/", tags=["root"])
    async def root() -> dict[str, Any]:
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "docs": settings.api_docs_url,
        }

    app.include_router(graph.router, prefix=f"{settings.api_prefix}/graph", tags=["graph"])

    return app


app = create_app()
