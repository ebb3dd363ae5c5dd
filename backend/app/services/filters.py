from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import and_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from app.core.errors import PayloadValidationError
from app.models.memory import Memory
from app.services.tags import split_tag_filter
from app.services.timeutils import parse_timestamp, to_utc


@dataclass
class ListCursor:
    memory_date: datetime
    id: str


@dataclass
class MemoryFilters:
    q: str | None = None
    location: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    tags: list[str] = field(default_factory=list)
    cursor: ListCursor | None = None

    @classmethod
    def from_query(
        cls,
        q: str | None = None,
        location: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        tags: str | None = None,
        cursor_date: str | None = None,
        cursor_id: str | None = None,
    ) -> "MemoryFilters":
        cursor = None
        if cursor_date and cursor_id:
            cursor = ListCursor(
                memory_date=_parse_filter_date("cursorDate", cursor_date),
                id=_parse_cursor_id(cursor_id),
            )
        return cls(
            q=q or None,
            location=location or None,
            start_date=_parse_filter_date("startDate", start_date) if start_date else None,
            end_date=_parse_filter_date("endDate", end_date, end_of_day=True) if end_date else None,
            tags=split_tag_filter(tags),
            cursor=cursor,
        )


@dataclass
class FilterClause:
    conditions: list[ColumnElement[bool]]

    @property
    def predicate(self) -> ColumnElement[bool]:
        if not self.conditions:
            return true()
        return and_(*self.conditions)

    @property
    def params(self) -> dict[str, Any]:
        return self.predicate.compile().params


def _parse_filter_date(name: str, raw: str, *, end_of_day: bool = False) -> datetime:
    try:
        return parse_timestamp(raw, end_of_day=end_of_day)
    except ValueError as exc:
        raise PayloadValidationError(f"Invalid {name}.", details={"field": name, "value": raw}) from exc


def _parse_cursor_id(raw: str) -> str:
    try:
        return str(UUID(raw))
    except ValueError as exc:
        raise PayloadValidationError("Invalid cursorId.", details={"field": "cursorId", "value": raw}) from exc


def cursor_condition(cursor: ListCursor) -> ColumnElement[bool]:
    """Rows strictly after ``cursor`` in ``(memory_date DESC, id DESC)`` order."""
    cursor_date = to_utc(cursor.memory_date)
    return or_(
        Memory.memory_date < cursor_date,
        and_(Memory.memory_date == cursor_date, Memory.id < cursor.id),
    )


def build_filter_clause(filters: MemoryFilters) -> FilterClause:
    conditions: list[ColumnElement[bool]] = []

    if filters.q:
        conditions.append(
            or_(
                Memory.content.icontains(filters.q, autoescape=True),
                Memory.caption.icontains(filters.q, autoescape=True),
                Memory.location.icontains(filters.q, autoescape=True),
                Memory.tags.icontains(filters.q, autoescape=True),
            )
        )
    if filters.location:
        conditions.append(Memory.location.icontains(filters.location, autoescape=True))
    if filters.start_date:
        conditions.append(Memory.memory_date >= to_utc(filters.start_date))
    if filters.end_date:
        conditions.append(Memory.memory_date <= to_utc(filters.end_date))
    if filters.tags:
        # Substring match per tag: "cat" also matches a stored "catering".
        conditions.append(and_(*(Memory.tags.icontains(tag, autoescape=True) for tag in filters.tags)))
    if filters.cursor:
        conditions.append(cursor_condition(filters.cursor))

    return FilterClause(conditions=conditions)
