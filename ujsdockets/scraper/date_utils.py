from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from . import config

PORTAL_DATE_FORMAT = "%m/%d/%Y"
ISO_DATE_FORMAT = "%Y-%m-%d"
SUMMARY_TIME_FORMAT = "%a, %b %d, %Y %I:%M %p"


def portal_now() -> datetime:
    """Return the current wall-clock time in the portal's timezone."""

    return datetime.now(ZoneInfo(config.PORTAL_TIMEZONE))


def portal_today() -> date:
    return portal_now().date()


def default_start_date() -> date:
    """Yesterday in the portal's timezone, the newest complete filing day."""

    return portal_today() - timedelta(days=1)


def parse_iso_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string. Raises ``ValueError`` otherwise."""

    candidate = (value or "").strip()
    return datetime.strptime(candidate, ISO_DATE_FORMAT).date()


def portal_to_iso(value: str) -> str:
    """Normalise a portal ``MM/DD/YYYY`` date to ``YYYY-MM-DD``.

    Raises ``ValueError`` when the text is not a real calendar date in that
    format; callers must not emit a record carrying the raw value.
    """

    candidate = (value or "").strip()
    return datetime.strptime(candidate, PORTAL_DATE_FORMAT).strftime(ISO_DATE_FORMAT)


def format_summary_time(moment: datetime) -> str:
    return moment.strftime(SUMMARY_TIME_FORMAT)


__all__ = [
    "default_start_date",
    "format_summary_time",
    "parse_iso_date",
    "portal_now",
    "portal_to_iso",
    "portal_today",
]
