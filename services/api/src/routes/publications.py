"""
Publication routes.

Paginated, filterable, sortable and groupable read access to the
bibliography, plus cache monitoring.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from shared.models import (
    CacheStats,
    GroupMode,
    Publication,
    PublicationQuery,
    PublicationsPage,
    ResponseMode,
    SortDirection,
    SortKey,
)
from shared.utils import LoggerAdapter, get_logger, get_settings
from services.ingestion.src.parsers import BibParseError

from ..publications import PublicationService

router = APIRouter(tags=["Publications"])
settings = get_settings()
logger = get_logger(__name__)


def get_publication_service(request: Request) -> PublicationService:
    """Service instance created by the application lifespan."""
    service = getattr(request.app.state, "publication_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Publication service not initialized",
        )
    return service


def get_publication_query(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(
        settings.default_page_limit,
        ge=1,
        le=settings.max_page_limit,
        description="Page size",
    ),
    sort: SortKey = Query(SortKey.TIME, description="Sort key"),
    direction: SortDirection = Query(SortDirection.DESC, description="Sort direction"),
    group: GroupMode = Query(GroupMode.YEAR, description="Group the page by year"),
    search: str = Query("", description="Whitespace-separated search terms"),
    mode: ResponseMode = Query(ResponseMode.FULL, description="Full or minimal records"),
) -> PublicationQuery:
    """Collect query-string parameters into a PublicationQuery."""
    return PublicationQuery(
        page=page,
        limit=limit,
        sort=sort,
        direction=direction,
        group=group,
        search=search,
        mode=mode,
    )


@router.get("/api/publications", response_model=None)
def list_publications(
    request: Request,
    params: PublicationQuery = Depends(get_publication_query),
    service: PublicationService = Depends(get_publication_service),
) -> PublicationsPage:
    """
    Query publications.

    Process:
    1. Load publications (cached, re-extracted after the TTL)
    2. Keep records matching every search term
    3. Sort by the requested key and direction
    4. Slice the requested page
    5. Group the page by year when requested (full mode only)

    An unreadable or empty bibliography yields an empty page, not an error.
    """
    request_logger = LoggerAdapter(logger, {"path": request.url.path})

    result = service.query(params)

    request_logger.info(
        "Served publications page",
        extra={
            "page": result.pagination.page,
            "total_items": result.pagination.total_items,
            "search": params.search,
        },
    )
    return result


@router.get("/publications", response_model=List[Publication])
def all_publications(
    service: PublicationService = Depends(get_publication_service),
) -> List[Publication]:
    """
    Every publication, newest first.

    Used by embed widgets that filter and sort on the client.
    """
    return service.get_publications()


@router.get("/api/stats", response_model=CacheStats, tags=["Monitoring"])
def get_stats(service: PublicationService = Depends(get_publication_service)) -> CacheStats:
    """Publication cache statistics."""
    return service.stats()


@router.post("/api/cache/refresh", response_model=CacheStats, tags=["Monitoring"])
def refresh_cache(
    request: Request,
    service: PublicationService = Depends(get_publication_service),
) -> CacheStats:
    """
    Re-extract publications from the bibliography immediately.

    Raises:
        HTTPException: 503 if the bibliography cannot be read or parsed
    """
    request_logger = LoggerAdapter(logger, {"path": request.url.path})

    try:
        stats = service.refresh()
    except (BibParseError, OSError, UnicodeDecodeError) as e:
        request_logger.error(
            f"Cache refresh failed: {e}",
            extra={"source_path": str(service.source_path)},
        )
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Cache refresh failed: {e}",
        )

    request_logger.info("Publication cache refreshed on request", extra={"records": stats.size})
    return stats
