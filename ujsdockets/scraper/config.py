"""Configuration constants for the UJS portal docket scraper."""
from __future__ import annotations

import os
from pathlib import Path

SEARCH_URL: str = os.getenv("UJS_SEARCH_URL", "https://ujsportal.pacourts.us/CaseSearch")
SITE_ORIGIN: str = os.getenv("UJS_SITE_ORIGIN", "https://ujsportal.pacourts.us").rstrip("/")

LOG_DIR: Path = Path(os.getenv("UJS_LOG_DIR", "logs"))
RUNS_DIR: Path = Path(os.getenv("UJS_RUNS_DIR", "runs"))
JSON_FILENAME: str = "dockets.json"
CSV_FILENAME: str = "dockets.csv"

PORTAL_TIMEZONE: str = "America/New_York"

# Court-type literal and docket id shape used to keep criminal MDJ dockets.
MAGISTERIAL_DISTRICT: str = "Magisterial District"
CRIMINAL_DOCKET_PATTERN: str = r"[A-Z]{2}-\d{4,6}-CR-\d{4,8}-\d{4}"


def _parse_int(env_var: str, default: int, *, minimum: int | None = None) -> int:
    """Parse an integer from the environment, falling back on bad input."""

    try:
        value = int(os.getenv(env_var, str(default)))
    except ValueError:
        return default
    if minimum is not None:
        return max(minimum, value)
    return value


def _parse_float(env_var: str, default: float) -> float:
    try:
        return float(os.getenv(env_var, str(default)))
    except ValueError:
        return default


def _parse_status_codes(env_var: str, default: frozenset[int]) -> frozenset[int]:
    raw = os.getenv(env_var)
    if not raw:
        return default
    codes = set()
    for part in raw.split(","):
        part = part.strip()
        if part.isdigit():
            codes.add(int(part))
    return frozenset(codes) or default


DEFAULT_CONCURRENCY: int = _parse_int("UJS_CONCURRENCY", 5)
MAX_ATTEMPTS: int = _parse_int("UJS_MAX_ATTEMPTS", 3)
REQUEST_TIMEOUT_SECONDS: float = _parse_float("UJS_REQUEST_TIMEOUT_SECONDS", 60.0)
BACKOFF_BASE_SECONDS: float = _parse_float("UJS_BACKOFF_BASE_SECONDS", 1.0)
BACKOFF_CAP_SECONDS: float = _parse_float("UJS_BACKOFF_CAP_SECONDS", 30.0)
RETRYABLE_STATUS_CODES: frozenset[int] = _parse_status_codes(
    "UJS_RETRYABLE_STATUSES", frozenset({408, 429, 500, 502, 503, 504})
)

# Oldest filed date the portal search is queried for, counted back from today.
LOOKBACK_DAYS: int = _parse_int("UJS_LOOKBACK_DAYS", 365, minimum=1)

USER_AGENT: str = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_14_6) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/88.0.4324.192 Safari/537.36"
)

COMMON_HEADERS: dict[str, str] = {
    "User-Agent": USER_AGENT,
    "Accept": "*/*",
}
