"""
Postboard Backend Application

Posts, threaded comments and signed votes behind a JSON API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from api.v1 import router as api_v1_router
from core.config import settings
from core.events import create_start_app_handler, create_stop_app_handler
from core.exceptions import InvalidArgument, PostboardError, StorageFailure
from core.middleware import REQUEST_ID_HEADER, RequestContextMiddleware, SecurityHeadersMiddleware

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    # Startup
    await create_start_app_handler(app)()
    yield
    # Shutdown
    await create_stop_app_handler(app)()


def _error_response(exc: PostboardError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=exc.headers,
    )


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return InvalidArgument.default_message
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", InvalidArgument.default_message)
    return f"{location}: {message}" if location else message


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title=settings.APP_NAME,
        description="Posts, threaded comments and votes",
        version="1.0.0",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # Add middleware (order matters - processed in reverse)
    # 1. Security headers - added to all responses
    application.add_middleware(SecurityHeadersMiddleware)

    # 2. Request id + structlog context
    application.add_middleware(RequestContextMiddleware)

    # 3. CORS - restricted to specific methods and headers
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )

    # 4. GZip compression for responses
    application.add_middleware(GZipMiddleware, minimum_size=1000)

    # Include routers
    application.include_router(api_v1_router, prefix="/api/v1")

    @application.exception_handler(PostboardError)
    async def postboard_error_handler(request: Request, exc: PostboardError) -> JSONResponse:
        if isinstance(exc, StorageFailure):
            logger.error("storage_failure", code=exc.code, path=request.url.path, method=request.method)
        return _error_response(exc)

    @application.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(InvalidArgument(_first_validation_message(exc)))

    @application.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        # Backend diagnostics go to the log only
        logger.error(
            "database_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method,
        )
        return _error_response(StorageFailure())

    # Add global exception handler to ensure CORS headers are present on error responses
    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler to catch unhandled exceptions.

        Returns the generic error body so CORS middleware can still add its
        headers; the details are only logged.
        """
        logger.exception(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method,
        )

        return JSONResponse(
            status_code=500,
            content={
                "detail": PostboardError.default_message,
                "code": PostboardError.code,
            },
        )

    return application


app = create_application()


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "healthy", "service": "postboard-api"}


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/docs" if settings.DEBUG else "Documentation disabled in production",
    }
