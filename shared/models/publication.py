"""
Shared Pydantic models for the BibShelf publication service.

These models are the contract between the BibTeX extractor and the query API.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNTITLED = "Untitled"
UNKNOWN_AUTHORS = "Unknown Authors"
UNKNOWN_YEAR = "Unknown Year"
NO_URL = "#"


class SortKey(str, Enum):
    """Keys the publication list can be sorted by."""

    TIME = "time"
    TITLE = "title"
    AUTHOR = "author"
    CITATIONS = "citations"


class SortDirection(str, Enum):
    """Sort direction. ``asc`` inverts the base comparison of a sort key."""

    ASC = "asc"
    DESC = "desc"


class GroupMode(str, Enum):
    """How a result page is bucketed."""

    YEAR = "year"
    NONE = "none"


class ResponseMode(str, Enum):
    """Record projection returned to clients."""

    FULL = "full"
    MINIMAL = "minimal"


class Publication(BaseModel):
    """
    A single publication extracted from a BibTeX entry.

    Records are immutable; a new extraction pass creates new records with
    new ids rather than updating existing ones.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "0b6f0f5e-7b0e-4b8e-9a57-0d3c8c7d2a11",
                "title": "Attention Is All You Need",
                "authors": "Vaswani, Ashish and Shazeer, Noam",
                "year": "2017",
                "journal": "Advances in Neural Information Processing Systems",
                "citations": 120000,
                "url": "https://arxiv.org/abs/1706.03762",
                "bibtex": "@article{vaswani2017attention,\n  title={Attention Is All You Need},\n}",
                "timestamp": 1496268000000,
            }
        },
    )

    id: str = Field(default_factory=lambda: str(uuid4()), description="Unique record identifier")
    title: str = Field(default=UNTITLED, description="Publication title")
    authors: str = Field(default=UNKNOWN_AUTHORS, description="Whitespace-normalized author list")
    year: str = Field(default=UNKNOWN_YEAR, description="Year as written in the entry")
    journal: str = Field(default="", description="Journal or venue, may be empty")
    citations: int = Field(default=0, ge=0, description="Citation count parsed from the note field")
    url: str = Field(default=NO_URL, description="Link to the publication, '#' if none")
    bibtex: str = Field(default="", description="Raw BibTeX entry text")
    timestamp: Optional[int] = Field(
        None, description="Epoch milliseconds derived from year/month/day"
    )

    @field_validator("title", "authors", "year", "url")
    @classmethod
    def validate_label_not_blank(cls, v: str) -> str:
        """Labels shown in the UI must never be blank."""
        if not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v

    def to_summary(self) -> "PublicationSummary":
        """Project to the minimal response shape."""
        return PublicationSummary(
            id=self.id,
            title=self.title,
            authors=self.authors,
            year=self.year,
            journal=self.journal,
            url=self.url,
            timestamp=self.timestamp,
        )


class PublicationSummary(BaseModel):
    """Minimal projection of a publication, without bibtex and citations."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    authors: str
    year: str
    journal: str
    url: str
    timestamp: Optional[int] = None


class YearGroup(BaseModel):
    """Publications of one result page that share a year."""

    year: str
    publications: List[Publication] = Field(default_factory=list)


class Pagination(BaseModel):
    """Pagination block of a query response."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total_items: int = Field(..., ge=0, alias="totalItems")
    total_pages: int = Field(..., ge=0, alias="totalPages")


class PublicationsPage(BaseModel):
    """
    Response of the publications query endpoint.

    ``data`` is a flat list of records, or a list of year groups when the
    query asked for grouping.
    """

    data: Union[List[YearGroup], List[Publication], List[PublicationSummary]] = Field(
        default_factory=list
    )
    pagination: Pagination


class PublicationQuery(BaseModel):
    """
    Validated parameters of a publications query.

    The upper bound of ``limit`` is enforced by the HTTP layer from settings.
    """

    page: int = Field(default=1, ge=1, description="1-based page number")
    limit: int = Field(default=20, ge=1, description="Page size")
    sort: SortKey = Field(default=SortKey.TIME)
    direction: SortDirection = Field(default=SortDirection.DESC)
    group: GroupMode = Field(default=GroupMode.YEAR)
    search: str = Field(default="", description="Whitespace-separated search terms")
    mode: ResponseMode = Field(default=ResponseMode.FULL)


class CacheStats(BaseModel):
    """Snapshot of the publication cache state."""

    size: int = Field(..., ge=0, description="Number of cached records")
    ttl_seconds: float = Field(..., description="Configured time-to-live")
    last_refresh: Optional[datetime] = Field(None, description="Wall-clock time of last load")
    age_seconds: Optional[float] = Field(None, description="Seconds since last load")
    is_stale: bool = Field(..., description="Whether the next read triggers a reload")


class HealthResponse(BaseModel):
    """Health check response for monitoring."""

    status: str = Field(default="healthy", description="Service status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Application version")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    dependencies: Dict[str, bool] = Field(
        default_factory=dict, description="Status of external dependencies"
    )
