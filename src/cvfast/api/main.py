"""FastAPI application entry point for the CVFast API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cvfast.api.routes import auth, curriculums, health, sections, short_links, users
from cvfast.api.schemas.common import fail
from cvfast.config import configure_logging, get_settings
from cvfast.services.errors import NotFoundError, ShortLinkConflictError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize resources on startup and clean up on shutdown."""
    from cvfast.data.db import dispose_engine, init_db

    configure_logging()
    init_db()
    yield
    dispose_engine()


def _envelope(status_code: int, message: str, errors: list[str] | None = None, headers=None):
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(fail(message, errors)),
        headers=headers,
    )


def _format_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{location}: {error.get('msg')}" if location else str(error.get("msg"))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors in the response envelope."""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _envelope(exc.status_code, message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as a 400 envelope listing each problem."""
    errors = [_format_validation_error(error) for error in exc.errors()]
    return _envelope(status.HTTP_400_BAD_REQUEST, "Invalid data", errors)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _envelope(status.HTTP_404_NOT_FOUND, str(exc))


async def conflict_handler(request: Request, exc: ShortLinkConflictError) -> JSONResponse:
    logger.error("Short link conflict on %s: %s", request.url.path, exc)
    return _envelope(status.HTTP_409_CONFLICT, str(exc))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app() -> FastAPI:
    """Build the application with middleware, routers and error handlers."""
    settings = get_settings()
    application = FastAPI(
        title="CVFast API",
        description="API for building résumés and sharing them through short links",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(NotFoundError, not_found_handler)
    application.add_exception_handler(ShortLinkConflictError, conflict_handler)
    application.add_exception_handler(Exception, unhandled_exception_handler)

    application.include_router(health.router)
    application.include_router(auth.router, prefix="/api")
    application.include_router(users.router, prefix="/api")
    # /curriculums/shortlink/{hash} must win over the section routes
    application.include_router(curriculums.router, prefix="/api")
    application.include_router(sections.router, prefix="/api")
    application.include_router(short_links.router, prefix="/api")
    return application


app = create_app()


def main() -> None:
    """Start the development server."""
    import uvicorn

    uvicorn.run(
        "cvfast.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
