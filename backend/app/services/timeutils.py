from __future__ import annotations

from datetime import date, datetime, time, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    # SQLite hands back naive values; everything is stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(raw: str, *, end_of_day: bool = False) -> datetime:
    """Parse an ISO-8601 timestamp or a bare ``YYYY-MM-DD`` date.

    A bare date means midnight UTC, or 23:59:59.999 UTC with ``end_of_day``.
    Raises ``ValueError`` for anything else.
    """
    raw = raw.strip()
    if len(raw) == 10:
        day = date.fromisoformat(raw)
        moment = time(23, 59, 59, 999000) if end_of_day else time(0, 0)
        return datetime.combine(day, moment, tzinfo=timezone.utc)
    return to_utc(datetime.fromisoformat(raw))
