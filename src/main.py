"""
Main application entry point.

This module initializes and configures the FastAPI application.
It handles startup/shutdown events, renders errors, and wires everything together.
"""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from config.settings import settings
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.infrastructure.observability.request_logging import RequestLoggingMiddleware
from src.presentation.dependencies import get_database_connection, get_message_catalog
from src.presentation.errors import ApiError, build_error_body
from src.presentation.routes import router

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Startup: Load message catalogs, open the database pool, create the schema
    - Shutdown: Close database connections gracefully
    """
    logger.info("Starting User Signup API...")

    catalog = get_message_catalog()
    logger.info(f"Message catalogs loaded: {', '.join(catalog.supported_locales)}")

    db = get_database_connection()
    await db.connect()
    logger.info("Database connection pool initialized")

    await db.init_schema()

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down User Signup API...")
    await db.disconnect()
    logger.info("Application shutdown complete")


app = FastAPI(
    title="User Signup API",
    description="""
    User registration and account activation API.

    ## Features
    - Signup with username, email and password
    - Field validation with localized messages (Accept-Language: en, ru)
    - Activation token delivered by email
    - Account activation by token
    """,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.enable_request_logging:
    app.add_middleware(RequestLoggingMiddleware)
    logger.info("Request logging middleware enabled")


def _locale_for(request: Request) -> str:
    return get_message_catalog().resolve_locale(request.headers.get("Accept-Language"))


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError as a localized {path, timestamp, message} body."""
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_body(
            path=request.url.path,
            message_key=exc.message_key,
            catalog=get_message_catalog(),
            locale=_locale_for(request),
            validation_errors=exc.validation_errors,
        ),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Give framework errors (unknown route, wrong method) the same body shape.
    """
    body = build_error_body(
        request.url.path, "not_found", get_message_catalog(), _locale_for(request)
    )
    if exc.status_code != status.HTTP_404_NOT_FOUND:
        # No catalog entry for these, keep the framework's own text
        body["message"] = str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: anything unexpected becomes a 500 with the usual body."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_body(
            request.url.path, "internal_error", get_message_catalog(), _locale_for(request)
        ),
    )


app.include_router(router)


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "docs": "/docs",
        "health": "/api/1.0/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
