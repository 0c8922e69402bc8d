"""Entry-boundary validation of scrape input.

Everything here runs before any network access. Callers get back a
``ScrapeRequest`` whose dates and county list the engine can trust.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from . import config
from .counties import ALL_COUNTIES, canonical_county, is_all_counties
from .date_utils import parse_iso_date, portal_today
from .error_codes import ErrorKind, ScrapeError
from .models import ScrapeRequest

DateInput = Union[str, date, None]
CountySelector = Union[str, Iterable[str], None]


def _validation_error(message: str) -> ScrapeError:
    return ScrapeError(ErrorKind.VALIDATION, message)


def _coerce_date(value: DateInput, field_name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise _validation_error(
            f"{field_name} must be a date in YYYY-MM-DD format, got {value!r}"
        ) from None


def _check_window(value: date, field_name: str, *, today: date) -> None:
    earliest = today - timedelta(days=config.LOOKBACK_DAYS)
    if value >= today:
        raise _validation_error(f"{field_name} must be before today ({today.isoformat()})")
    if value < earliest:
        raise _validation_error(
            f"{field_name} must be on or after {earliest.isoformat()} "
            f"({config.LOOKBACK_DAYS} days back)"
        )


def resolve_counties(selector: CountySelector) -> tuple[str, ...]:
    """Expand a county selector into canonical county names.

    ``None``, ``"*"`` and ``"all"`` select every county. A comma-separated
    string or an iterable of names selects those counties, in the given order,
    with repeats dropped.
    """

    if selector is None or is_all_counties(selector):
        return ALL_COUNTIES

    if isinstance(selector, str):
        raw_names = selector.split(",")
    else:
        raw_names = list(selector)

    resolved: list[str] = []
    unknown: list[str] = []
    for raw in raw_names:
        name = str(raw).strip()
        if not name:
            continue
        if is_all_counties(name):
            return ALL_COUNTIES
        canonical = canonical_county(name)
        if canonical is None:
            unknown.append(name)
        elif canonical not in resolved:
            resolved.append(canonical)

    if unknown:
        raise _validation_error(f"Unknown county name(s): {', '.join(unknown)}")
    if not resolved:
        raise _validation_error("At least one county must be selected")
    return tuple(resolved)


def build_scrape_request(
    filed_start_date: DateInput,
    filed_end_date: DateInput = None,
    counties: CountySelector = None,
    concurrency: Optional[int] = None,
    *,
    today: Optional[date] = None,
) -> ScrapeRequest:
    """Validate raw input and return a normalised ``ScrapeRequest``."""

    current_day = today or portal_today()

    start = _coerce_date(filed_start_date, "filedStartDate")
    if start is None:
        raise _validation_error("filedStartDate is required")
    _check_window(start, "filedStartDate", today=current_day)

    end = _coerce_date(filed_end_date, "filedEndDate")
    if end is None:
        end = start
    else:
        _check_window(end, "filedEndDate", today=current_day)
        if end < start:
            raise _validation_error(
                f"filedEndDate ({end.isoformat()}) must not be before "
                f"filedStartDate ({start.isoformat()})"
            )

    limit = config.DEFAULT_CONCURRENCY if concurrency is None else concurrency
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise _validation_error(f"concurrency must be a positive integer, got {limit!r}")

    return ScrapeRequest(
        filed_start_date=start,
        filed_end_date=end,
        counties=resolve_counties(counties),
        concurrency=limit,
    )


__all__ = ["build_scrape_request", "resolve_counties"]
