"""
UTC datetime utilities for consistent timezone handling.

All datetime values stored in the directory are timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime

DAYS_PER_YEAR = 365


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries and on admin-supplied dates.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def whole_years_since(start: datetime, now: datetime | None = None) -> int:
    """
    Return complete 365-day years elapsed since start (never negative).

    A start date in the future yields 0.
    """
    start_utc = ensure_utc(start) or start
    current = ensure_utc(now) or utc_now()
    elapsed_days = (current - start_utc).days
    if elapsed_days <= 0:
        return 0
    return elapsed_days // DAYS_PER_YEAR
