from __future__ import annotations

from typing import AbstractSet, Optional

from . import config
from .error_codes import ErrorCode
from .logging_utils import _scraper_event

RETRYABLE_ERROR_CODES = {
    ErrorCode.NETWORK,
    ErrorCode.HTTP_5XX,
    ErrorCode.HTTP_429,
}

NON_RETRYABLE_ERROR_CODES = {
    ErrorCode.HTTP_401,
    ErrorCode.HTTP_403,
    ErrorCode.HTTP_404,
    ErrorCode.HTTP_4XX,
    # Bad URL or schema in the request itself.
    ErrorCode.REQUEST_INVALID,
}


def compute_backoff_seconds(
    attempt_index: int,
    *,
    base: Optional[float] = None,
    cap: Optional[float] = None,
) -> float:
    """Return a capped exponential backoff for the given attempt (1-based)."""

    base_seconds = config.BACKOFF_BASE_SECONDS if base is None else base
    cap_seconds = config.BACKOFF_CAP_SECONDS if cap is None else cap
    return float(min(base_seconds * 2 ** max(0, attempt_index - 1), cap_seconds))


def decide_retry(
    attempt_index: int,
    max_attempts: int,
    error: BaseException | None = None,
    *,
    error_code: Optional[str] = None,
    http_status: Optional[int] = None,
    retryable_statuses: Optional[AbstractSet[int]] = None,
) -> bool:
    """Decide whether a failed attempt should be retried."""

    statuses = config.RETRYABLE_STATUS_CODES if retryable_statuses is None else retryable_statuses
    code = (error_code or "").strip()

    def _emit(kind: str, will_retry: bool, **extra: object) -> bool:
        _scraper_event(
            "state",
            phase="retry_decision",
            kind=kind,
            error_code=code or None,
            attempt=attempt_index,
            max_attempts=max_attempts,
            http_status=http_status,
            will_retry=will_retry,
            **extra,
        )
        return will_retry

    if attempt_index >= max_attempts:
        return _emit("capped", False)

    if http_status is not None and http_status in statuses:
        return _emit("retryable_status", True)

    if code in NON_RETRYABLE_ERROR_CODES:
        return _emit("non_retryable", False)

    if code in RETRYABLE_ERROR_CODES:
        return _emit("retryable", True)

    if http_status is not None and http_status >= 500:
        return _emit("retryable", True)

    # Unknown context: be conservative and allow a single retry if available.
    fallback_retry = attempt_index < max_attempts - 1
    return _emit(
        "unknown" if code else "missing_error_code",
        fallback_retry,
        error_repr=repr(error) if error is not None else None,
    )


__all__ = [
    "decide_retry",
    "compute_backoff_seconds",
    "NON_RETRYABLE_ERROR_CODES",
    "RETRYABLE_ERROR_CODES",
]
