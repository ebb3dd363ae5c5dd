"""Unit tests for the filter query builder (no DB)."""
from datetime import datetime, timezone

import pytest

from app.core.errors import PayloadValidationError
from app.services.filters import MemoryFilters, build_filter_clause


def _sql(clause) -> str:
    return str(clause.predicate.compile())


class TestFromQuery:
    def test_bare_end_date_extends_to_end_of_day(self):
        filters = MemoryFilters.from_query(end_date="2024-01-15")
        assert filters.end_date == datetime(2024, 1, 15, 23, 59, 59, 999000, tzinfo=timezone.utc)

    def test_bare_start_date_is_midnight(self):
        filters = MemoryFilters.from_query(start_date="2024-01-15")
        assert filters.start_date == datetime(2024, 1, 15, tzinfo=timezone.utc)

    def test_full_timestamp_end_date_kept(self):
        filters = MemoryFilters.from_query(end_date="2024-01-15T10:00:00Z")
        assert filters.end_date == datetime(2024, 1, 15, 10, tzinfo=timezone.utc)

    def test_cursor_requires_both_parts(self):
        assert MemoryFilters.from_query(cursor_date="2024-01-15T10:00:00Z").cursor is None
        assert MemoryFilters.from_query(cursor_id="8d0d5b0e-5a4e-4b59-9a33-4f8a7f0c1d11").cursor is None

    def test_invalid_dates_rejected(self):
        with pytest.raises(PayloadValidationError):
            MemoryFilters.from_query(start_date="yesterday")
        with pytest.raises(PayloadValidationError):
            MemoryFilters.from_query(cursor_date="nope", cursor_id="8d0d5b0e-5a4e-4b59-9a33-4f8a7f0c1d11")

    def test_invalid_cursor_id_rejected(self):
        with pytest.raises(PayloadValidationError):
            MemoryFilters.from_query(cursor_date="2024-01-15T10:00:00Z", cursor_id="1 OR 1=1")


class TestBuildFilterClause:
    def test_no_filters_matches_everything(self):
        clause = build_filter_clause(MemoryFilters())
        assert clause.conditions == []
        assert clause.params == {}

    def test_values_are_bound_not_interpolated(self):
        hostile = "x'); DROP TABLE memories; --"
        clause = build_filter_clause(MemoryFilters(q=hostile, location=hostile, tags=[hostile]))
        sql = _sql(clause)
        assert "DROP TABLE" not in sql
        assert any(hostile in str(value) for value in clause.params.values())

    def test_search_covers_four_columns(self):
        sql = _sql(build_filter_clause(MemoryFilters(q="beach")))
        for column in ("content", "caption", "location", "tags"):
            assert f"memories.{column}" in sql
        assert " OR " in sql

    def test_each_tag_adds_a_condition(self):
        clause = build_filter_clause(MemoryFilters(tags=["cat", "dog"]))
        values = [str(value) for value in clause.params.values()]
        assert any("cat" in value for value in values)
        assert any("dog" in value for value in values)

    def test_filters_combine_with_and(self):
        clause = build_filter_clause(
            MemoryFilters.from_query(
                q="sun",
                location="paris",
                start_date="2024-01-01",
                end_date="2024-12-31",
                tags="trip",
                cursor_date="2024-06-01T00:00:00Z",
                cursor_id="8d0d5b0e-5a4e-4b59-9a33-4f8a7f0c1d11",
            )
        )
        assert len(clause.conditions) == 6
        assert " AND " in _sql(clause)
