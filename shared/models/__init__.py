"""Shared models package."""

from shared.models.publication import (
    NO_URL,
    UNKNOWN_AUTHORS,
    UNKNOWN_YEAR,
    UNTITLED,
    CacheStats,
    GroupMode,
    HealthResponse,
    Pagination,
    Publication,
    PublicationQuery,
    PublicationsPage,
    PublicationSummary,
    ResponseMode,
    SortDirection,
    SortKey,
    YearGroup,
)

__all__ = [
    "Publication",
    "PublicationSummary",
    "YearGroup",
    "Pagination",
    "PublicationsPage",
    "PublicationQuery",
    "SortKey",
    "SortDirection",
    "GroupMode",
    "ResponseMode",
    "CacheStats",
    "HealthResponse",
    "UNTITLED",
    "UNKNOWN_AUTHORS",
    "UNKNOWN_YEAR",
    "NO_URL",
]
