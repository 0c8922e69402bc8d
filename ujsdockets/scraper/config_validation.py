from __future__ import annotations

from typing import Literal

from . import config
from .logging_utils import _scraper_event
from .utils import log_line

Entrypoint = Literal["cli", "library", "tests"]


def _raise_config_error(message: str, *, entrypoint: Entrypoint, error: str) -> None:
    _scraper_event(
        "error",
        phase="config",
        context="runtime_validation",
        error=error,
        entrypoint=entrypoint,
    )
    log_line(f"[CONFIG] {message} (entrypoint={entrypoint})")
    raise ValueError(message)


def _clamp(field: str, value: int, adjusted: int, *, entrypoint: Entrypoint) -> None:
    _scraper_event(
        "state",
        phase="config",
        context="runtime_validation",
        kind="config_adjustment",
        field=field,
        value=value,
        adjusted=adjusted,
        entrypoint=entrypoint,
    )
    log_line(f"[CONFIG] {field} < 1; clamping to {adjusted}.")
    setattr(config, field, adjusted)


def validate_runtime_config(entrypoint: Entrypoint) -> None:
    """Validate runtime configuration for the given entrypoint.

    Raises ``ValueError`` when a blocking misconfiguration is detected.
    Non-fatal adjustments (clamping pool and retry knobs) are logged but do not
    raise.
    """

    if not config.SEARCH_URL.startswith(("http://", "https://")):
        _raise_config_error(
            "UJS_SEARCH_URL must be an absolute http(s) URL.",
            entrypoint=entrypoint,
            error="search_url_invalid",
        )

    if not config.SITE_ORIGIN.startswith(("http://", "https://")):
        _raise_config_error(
            "UJS_SITE_ORIGIN must be an absolute http(s) URL.",
            entrypoint=entrypoint,
            error="site_origin_invalid",
        )

    if config.DEFAULT_CONCURRENCY < 1:
        _clamp("DEFAULT_CONCURRENCY", config.DEFAULT_CONCURRENCY, 1, entrypoint=entrypoint)

    if config.MAX_ATTEMPTS < 1:
        _clamp("MAX_ATTEMPTS", config.MAX_ATTEMPTS, 1, entrypoint=entrypoint)

    if config.REQUEST_TIMEOUT_SECONDS <= 0:
        _raise_config_error(
            "UJS_REQUEST_TIMEOUT_SECONDS must be greater than zero.",
            entrypoint=entrypoint,
            error="invalid_timeout",
        )

    if config.BACKOFF_BASE_SECONDS < 0 or config.BACKOFF_CAP_SECONDS < 0:
        _raise_config_error(
            "Backoff settings must be non-negative.",
            entrypoint=entrypoint,
            error="invalid_backoff",
        )


__all__ = ["validate_runtime_config", "Entrypoint"]
