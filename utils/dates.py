from calendar import monthrange
from datetime import date, datetime, timedelta, timezone

import config


def normalize_date(raw_date: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` string into a date."""
    return datetime.strptime(raw_date.strip(), "%Y-%m-%d").date()


def today_in_reference_tz(utc_offset_hours: int | None = None) -> date:
    """Calendar date at the configured fixed UTC offset, independent of server locale."""
    if utc_offset_hours is None:
        utc_offset_hours = config.REFERENCE_UTC_OFFSET_HOURS
    tz = timezone(timedelta(hours=utc_offset_hours))
    return datetime.now(tz).date()


def last_day_of_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def weekday_sunday_first(d: date) -> int:
    """0=Sunday .. 6=Saturday."""
    return d.isoweekday() % 7


def days_between(earlier: date, later: date) -> int:
    """Whole calendar days from ``earlier`` to ``later``."""
    return (later - earlier).days


def resolve_as_of(as_of_date: str | None) -> date:
    """Parse an optional ``as_of_date`` override, defaulting to the reference today."""
    if as_of_date:
        return date.fromisoformat(as_of_date)
    return today_in_reference_tz()
