from __future__ import annotations

import asyncio
import urllib.parse
from typing import AbstractSet, Any, Awaitable, Callable, Optional

import requests
from requests.adapters import HTTPAdapter

from . import config
from .error_codes import ErrorCode, ErrorKind, ScrapeError, classify_http_status
from .logging_utils import _scraper_event
from .models import HttpRequest, RawResponse
from .retry_policy import compute_backoff_seconds, decide_retry

SleepFn = Callable[[float], Awaitable[None]]

# Broken or dropped connections worth another attempt. Any other
# RequestException (bad URL, bad schema) fails without retrying.
TRANSIENT_REQUEST_ERRORS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.ContentDecodingError,
)


def build_http_session(pool_size: int = config.DEFAULT_CONCURRENCY) -> requests.Session:
    """Return a requests session whose connection pool fits ``pool_size`` jobs."""

    size = max(1, pool_size)
    session = requests.Session()
    session.headers.update(config.COMMON_HEADERS)
    adapter = HTTPAdapter(pool_connections=size, pool_maxsize=size)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _redact_url(url: str) -> str:
    try:
        parsed = urllib.parse.urlparse(url)
        return urllib.parse.urlunparse(parsed._replace(query=""))
    except Exception:
        return url


def _response_cookies(response: Any) -> tuple[tuple[str, str], ...]:
    jar = getattr(response, "cookies", None)
    if not jar:
        return ()
    return tuple((str(name), str(value)) for name, value in jar.items())


def _to_raw_response(response: Any) -> RawResponse:
    return RawResponse(
        status_code=int(response.status_code),
        reason=str(getattr(response, "reason", "") or ""),
        text=response.text or "",
        headers=dict(getattr(response, "headers", None) or {}),
        cookies=_response_cookies(response),
    )


class RetryingTransport:
    """Perform one HTTP exchange with bounded retries and status validation.

    The blocking ``requests`` call runs in a worker thread so the event loop
    that schedules county jobs stays free; backoff waits are cooperative.
    Only 2xx responses are returned. Anything else ends in a
    ``ScrapeError(kind="http")`` carrying the last status seen.
    """

    def __init__(
        self,
        session: Optional[Any] = None,
        *,
        max_attempts: Optional[int] = None,
        timeout: Optional[float] = None,
        retryable_statuses: Optional[AbstractSet[int]] = None,
        sleep: Optional[SleepFn] = None,
    ) -> None:
        self._session = session if session is not None else build_http_session()
        self._max_attempts = max(1, max_attempts if max_attempts is not None else config.MAX_ATTEMPTS)
        self._timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT_SECONDS
        self._retryable_statuses = (
            frozenset(retryable_statuses)
            if retryable_statuses is not None
            else config.RETRYABLE_STATUS_CODES
        )
        self._sleep: SleepFn = sleep or asyncio.sleep

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def _send(self, request: HttpRequest) -> Any:
        kwargs: dict[str, Any] = {
            "headers": dict(request.headers),
            "timeout": request.timeout or self._timeout,
        }
        if request.form_fields is not None:
            kwargs["files"] = [(name, (None, value)) for name, value in request.form_fields]
        return self._session.request(request.method, request.url, **kwargs)

    async def execute(self, request: HttpRequest, *, label: Optional[str] = None) -> RawResponse:
        safe_url = _redact_url(request.url)
        tag = label or safe_url
        last_status: Optional[int] = None
        last_message = "request failed"

        for attempt in range(1, self._max_attempts + 1):
            status: Optional[int] = None
            error: Optional[BaseException] = None
            try:
                response = await asyncio.to_thread(self._send, request)
            except requests.RequestException as exc:
                error = exc
                error_code = (
                    ErrorCode.NETWORK if isinstance(exc, TRANSIENT_REQUEST_ERRORS) else ErrorCode.REQUEST_INVALID
                )
                last_message = f"{type(exc).__name__}: {exc}"
            else:
                status = int(response.status_code)
                if 200 <= status < 300:
                    _scraper_event(
                        "http",
                        phase="request",
                        target=tag,
                        method=request.method,
                        status="ok",
                        http_status=status,
                        attempt=attempt,
                    )
                    return _to_raw_response(response)
                last_status = status
                error_code = classify_http_status(status)
                last_message = str(getattr(response, "reason", "") or f"HTTP {status}")

            should_retry = decide_retry(
                attempt_index=attempt,
                max_attempts=self._max_attempts,
                error=error,
                error_code=error_code,
                http_status=status,
                retryable_statuses=self._retryable_statuses,
            )
            backoff = compute_backoff_seconds(attempt)
            _scraper_event(
                "state",
                phase="request_retry",
                target=tag,
                method=request.method,
                url=safe_url,
                attempt=attempt,
                max_attempts=self._max_attempts,
                error_code=error_code,
                http_status=status,
                will_retry=should_retry,
                backoff_seconds=backoff if should_retry else None,
                error_message=last_message,
            )

            if not should_retry:
                raise ScrapeError(ErrorKind.HTTP, last_message, status_code=last_status) from error

            await self._sleep(backoff)

        # decide_retry caps at max_attempts, so the loop always exits via raise.
        raise ScrapeError(ErrorKind.HTTP, last_message, status_code=last_status)


__all__ = ["RetryingTransport", "build_http_session"]
