"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from keyword_import.api.v1.router import api_router
from keyword_import.config import settings
from keyword_import.core.database import close_db, init_db
from keyword_import.core.exceptions import KeywordImportError
from keyword_import.core.logging import setup_logging
from keyword_import.schemas.keyword_import import ErrorBody, ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    setup_logging()

    logger.info(
        "Starting KeywordImport",
        extra={
            "environment": settings.environment,
            "version": settings.app_version,
            "max_batch_size": settings.keyword_import_max_batch_size,
        },
    )

    if settings.environment == "development":
        await init_db()
        logger.info("Development database initialized")

    yield

    logger.info("Shutting down KeywordImport")
    await close_db()


async def keyword_import_error_handler(request: Request, exc: KeywordImportError) -> JSONResponse:
    """Render call-level import failures as a structured error body."""
    logger.warning(
        "Keyword import rejected",
        extra={"code": exc.code, "path": request.url.path, "error": exc.message},
    )
    body = ErrorResponse(error=ErrorBody(**exc.to_dict()))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies in the same envelope as import failures."""
    body = ErrorResponse(
        error=ErrorBody(
            code="VALIDATION_ERROR",
            message="Invalid request body",
            details={"errors": jsonable_encoder(exc.errors())},
        )
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump(mode="json"))


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Bulk keyword ingestion service: format detection, locale classification, "
            "priority scoring and duplicate-aware writes for multi-locale keyword lists"
        ),
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        cast(Any, CORSMiddleware),
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(KeywordImportError, cast(Any, keyword_import_error_handler))
    app.add_exception_handler(RequestValidationError, cast(Any, request_validation_error_handler))

    # Include API router
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    @app.get(
        "/health",
        summary="Health check",
        description="Return service health status and backend version information.",
    )
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()
