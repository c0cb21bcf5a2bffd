"""
Publication query service.

Runs the read pipeline over the cached record set:
load-or-reuse cache → filter → sort → paginate → group → shape.
"""

from pathlib import Path
from typing import List, Optional, Union

from shared.models import (
    CacheStats,
    GroupMode,
    Pagination,
    Publication,
    PublicationQuery,
    PublicationsPage,
    ResponseMode,
)
from shared.utils import get_logger
from services.ingestion.src.parsers import BibParseError, load_publications

from .cache import PublicationCache
from .query import filter_publications, group_by_year, paginate, sort_publications

logger = get_logger(__name__)


class PublicationService:
    """
    Serves paginated publication queries from a PublicationCache.

    Source failures (unreadable file, no valid publications) are logged and
    answered with an empty result instead of an error.
    """

    def __init__(self, cache: PublicationCache, source_path: Optional[Path] = None):
        """
        Initialize the service.

        Args:
            cache: Cache owning the extracted record set
            source_path: Bibliography file behind the cache, for diagnostics
        """
        self.cache = cache
        self.source_path = source_path

    @classmethod
    def from_source(cls, source_path: Union[str, Path], ttl_seconds: float) -> "PublicationService":
        """Build a service whose cache extracts from a BibTeX file."""
        path = Path(source_path)
        cache = PublicationCache(loader=lambda: load_publications(path), ttl_seconds=ttl_seconds)
        return cls(cache=cache, source_path=path)

    def get_publications(self) -> List[Publication]:
        """
        Current record set, extraction order (newest first).

        Returns an empty list when the source cannot be read or parsed.
        """
        try:
            return self.cache.get()
        except BibParseError as e:
            logger.error(
                f"No valid publications in {self.source_path}: {e}",
                extra={"source_path": str(self.source_path), "code": e.code.value},
            )
        except (OSError, UnicodeDecodeError) as e:
            logger.error(
                f"Error loading publications from {self.source_path}: {e}",
                extra={"source_path": str(self.source_path)},
            )
        return []

    def query(self, params: PublicationQuery) -> PublicationsPage:
        """
        Run one publications query.

        Grouping applies to the requested page only, not the whole result
        set. Minimal mode is never grouped.

        Args:
            params: Validated query parameters

        Returns:
            One page of records plus pagination metadata
        """
        publications = self.get_publications()
        if not publications:
            return PublicationsPage(
                data=[],
                pagination=Pagination(page=1, limit=params.limit, total_items=0, total_pages=0),
            )

        filtered = filter_publications(publications, params.search)
        ordered = sort_publications(filtered, params.sort, params.direction)
        page_items, total_items, total_pages = paginate(ordered, params.page, params.limit)

        pagination = Pagination(
            page=params.page,
            limit=params.limit,
            total_items=total_items,
            total_pages=total_pages,
        )

        logger.debug(
            "Publications query",
            extra={
                "search": params.search,
                "sort": params.sort.value,
                "direction": params.direction.value,
                "matched": total_items,
                "returned": len(page_items),
            },
        )

        if params.mode == ResponseMode.MINIMAL:
            return PublicationsPage(
                data=[pub.to_summary() for pub in page_items],
                pagination=pagination,
            )

        if params.group == GroupMode.YEAR:
            return PublicationsPage(
                data=group_by_year(page_items, params.sort, params.direction),
                pagination=pagination,
            )

        return PublicationsPage(data=page_items, pagination=pagination)

    def refresh(self) -> CacheStats:
        """
        Force a reload from the source.

        Raises:
            OSError, UnicodeDecodeError, BibParseError: If the reload fails
        """
        self.cache.refresh()
        return self.cache.stats()

    def stats(self) -> CacheStats:
        """Cache statistics."""
        return self.cache.stats()

    def source_available(self) -> bool:
        """Whether the bibliography file exists."""
        return self.source_path is not None and self.source_path.is_file()
