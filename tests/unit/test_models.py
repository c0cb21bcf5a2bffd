"""
Unit tests for Pydantic data models.

Validates model creation, validation, and serialization.
"""

import pytest
from pydantic import ValidationError

from shared.models import (
    GroupMode,
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


class TestPublication:
    """Tests for Publication model."""

    def test_defaults(self):
        pub = Publication()

        assert pub.title == "Untitled"
        assert pub.authors == "Unknown Authors"
        assert pub.year == "Unknown Year"
        assert pub.journal == ""
        assert pub.citations == 0
        assert pub.url == "#"
        assert pub.timestamp is None
        assert pub.id

    def test_ids_are_generated_per_instance(self):
        assert Publication().id != Publication().id

    def test_negative_citations_rejected(self):
        with pytest.raises(ValidationError):
            Publication(citations=-1)

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Publication(title="   ")

        assert "cannot be empty" in str(exc_info.value)

    def test_frozen(self):
        pub = Publication(title="Fixed")

        with pytest.raises(ValidationError):
            pub.title = "Changed"

    def test_to_summary_drops_bibtex_and_citations(self):
        pub = Publication(title="T", citations=3, bibtex="@misc{t}", timestamp=5)
        summary = pub.to_summary()

        assert isinstance(summary, PublicationSummary)
        assert summary.id == pub.id
        assert summary.timestamp == 5
        assert "bibtex" not in summary.model_dump()
        assert "citations" not in summary.model_dump()


class TestPagination:
    """Tests for Pagination model."""

    def test_serializes_camel_case(self):
        pagination = Pagination(page=2, limit=10, total_items=25, total_pages=3)

        assert pagination.model_dump(by_alias=True) == {
            "page": 2,
            "limit": 10,
            "totalItems": 25,
            "totalPages": 3,
        }

    def test_accepts_aliases(self):
        pagination = Pagination(page=1, limit=5, totalItems=0, totalPages=0)
        assert pagination.total_items == 0

    def test_page_must_be_positive(self):
        with pytest.raises(ValidationError):
            Pagination(page=0, limit=10, total_items=0, total_pages=0)


class TestPublicationsPage:
    """Tests for PublicationsPage serialization."""

    def test_grouped_data_serializes_groups(self):
        pub = Publication(title="Grouped", year="2020")
        page = PublicationsPage(
            data=[YearGroup(year="2020", publications=[pub])],
            pagination=Pagination(page=1, limit=20, total_items=1, total_pages=1),
        )

        dumped = page.model_dump(by_alias=True)

        assert dumped["data"][0]["year"] == "2020"
        assert dumped["data"][0]["publications"][0]["title"] == "Grouped"
        assert dumped["pagination"]["totalItems"] == 1

    def test_full_records_keep_all_fields(self):
        pub = Publication(title="Full", bibtex="@misc{full}", citations=9)
        page = PublicationsPage(
            data=[pub],
            pagination=Pagination(page=1, limit=20, total_items=1, total_pages=1),
        )

        record = page.model_dump()["data"][0]

        assert record["bibtex"] == "@misc{full}"
        assert record["citations"] == 9


class TestPublicationQuery:
    """Tests for PublicationQuery model."""

    def test_defaults(self):
        query = PublicationQuery()

        assert query.page == 1
        assert query.limit == 20
        assert query.sort == SortKey.TIME
        assert query.direction == SortDirection.DESC
        assert query.group == GroupMode.YEAR
        assert query.search == ""
        assert query.mode == ResponseMode.FULL

    def test_string_values_coerced_to_enums(self):
        query = PublicationQuery(sort="citations", direction="asc", group="none", mode="minimal")

        assert query.sort == SortKey.CITATIONS
        assert query.direction == SortDirection.ASC
        assert query.group == GroupMode.NONE
        assert query.mode == ResponseMode.MINIMAL

    @pytest.mark.parametrize("field,value", [("page", 0), ("limit", 0), ("sort", "year")])
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            PublicationQuery(**{field: value})
