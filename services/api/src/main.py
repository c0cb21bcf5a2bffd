"""
BibShelf API Service

FastAPI application serving publications extracted from a BibTeX file.
Provides paginated, filterable, sortable and groupable read access.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from shared.models import HealthResponse
from shared.utils import get_settings, setup_logging

from .publications import PublicationService
from .routes.publications import router as publications_router

# Initialize configuration and logging
settings = get_settings()
logger = setup_logging(
    service_name="api",
    log_level=settings.log_level,
    log_format=settings.log_format,
    log_output=settings.log_output,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Lifespan context manager for startup and shutdown events.

    Builds the publication cache and query service. Extraction itself is
    lazy and happens on the first request.
    """
    logger.info(
        "Starting BibShelf API",
        extra={
            "version": settings.app_version,
            "environment": settings.environment,
            "bib_source_path": settings.bib_source_path,
        },
    )

    app.state.publication_service = PublicationService.from_source(
        settings.bib_source,
        ttl_seconds=settings.cache_ttl_seconds,
    )

    if not settings.bib_source.is_file():
        logger.warning(f"Bibliography not found: {settings.bib_source}")

    yield  # Application runs here

    logger.info("Shutting down BibShelf API")


# Create FastAPI application
app = FastAPI(
    title="BibShelf API",
    description="Publications from a BibTeX bibliography",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,  # type: ignore
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept"],
)

if settings.enable_compression:
    app.add_middleware(GZipMiddleware, minimum_size=settings.compression_minimum_size)

app.include_router(publications_router)


# =============================================================================
# Service Endpoints
# =============================================================================
@app.get("/", tags=["Monitoring"])
async def root() -> dict:
    """Service information."""
    return {
        "service": "BibShelf API",
        "version": settings.app_version,
        "status": "operational",
    }


@app.get("/health", response_model=HealthResponse, tags=["Monitoring"])
async def health_check() -> HealthResponse:
    """
    Health check endpoint for load balancers and monitoring.

    Reports whether the bibliography exists and whether the cache holds
    records. An empty cache is normal before the first query.
    """
    service = getattr(app.state, "publication_service", None)

    dependencies = {
        "bibliography": bool(service and service.source_available()),
        "cache": bool(service and service.stats().size > 0),
    }

    return HealthResponse(
        status="healthy" if dependencies["bibliography"] else "degraded",
        service="api",
        version=settings.app_version,
        dependencies=dependencies,
    )


# =============================================================================
# Error Handlers
# =============================================================================
@app.exception_handler(Exception)
async def global_exception_handler(request, exc: Exception) -> JSONResponse:
    """Global exception handler to prevent leaking stack traces in production."""
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={
            "path": str(request.url),
            "method": request.method,
        },
    )

    if settings.is_production:
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error. Please contact support."},
        )
    else:
        return JSONResponse(
            status_code=500,
            content={
                "detail": str(exc),
                "type": type(exc).__name__,
            },
        )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.api.src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
