from __future__ import annotations

"""Error taxonomy for scraper failures.

``ErrorKind`` is the closed set of failure variants a run can end with. Every
failure surfaces as a single ``ScrapeError`` tagged with one of these kinds;
callers branch on ``exc.kind`` rather than on exception subclasses.

``ErrorCode`` is the finer-grained classification used by the retry policy
and included in structured logs so that a failed request can be explained.
"""

from typing import Optional


class ErrorKind:
    VALIDATION = "validation"
    SESSION = "session"
    HTTP = "http"
    EXTRACTION = "extraction"
    INTERNAL = "internal"


ALL_ERROR_KINDS = (
    ErrorKind.VALIDATION,
    ErrorKind.SESSION,
    ErrorKind.HTTP,
    ErrorKind.EXTRACTION,
    ErrorKind.INTERNAL,
)


class ErrorCode:
    NETWORK = "network_error"
    HTTP_4XX = "http_4xx"
    HTTP_401 = "http_401_unauthorised"
    HTTP_403 = "http_403_forbidden"
    HTTP_404 = "http_404_not_found"
    HTTP_429 = "http_429_rate_limited"
    HTTP_5XX = "http_5xx"
    REQUEST_INVALID = "request_invalid"
    INTERNAL = "internal_error"


class ScrapeError(Exception):
    """A tagged scraper failure.

    ``status_code`` is set for HTTP-class failures (and for session failures
    caused by one); ``county`` names the job that failed, when there is one.
    """

    def __init__(
        self,
        kind: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        county: Optional[str] = None,
    ) -> None:
        if kind not in ALL_ERROR_KINDS:
            raise ValueError(f"Unknown error kind: {kind!r}")
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.county = county

    def with_county(self, county: str) -> "ScrapeError":
        """Return a copy of this error attributed to ``county``."""

        if self.county == county:
            return self
        copy = ScrapeError(
            self.kind,
            self.message,
            status_code=self.status_code,
            county=county,
        )
        copy.__cause__ = self.__cause__ or self
        return copy

    def __str__(self) -> str:
        parts = [self.kind]
        if self.county:
            parts.append(f"county={self.county}")
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        return f"[{' '.join(parts)}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"ScrapeError(kind={self.kind!r}, message={self.message!r}, "
            f"status_code={self.status_code!r}, county={self.county!r})"
        )


def classify_http_status(status: Optional[int]) -> str:
    if status is None:
        return ErrorCode.INTERNAL
    if status == 401:
        return ErrorCode.HTTP_401
    if status == 403:
        return ErrorCode.HTTP_403
    if status == 404:
        return ErrorCode.HTTP_404
    if status == 429:
        return ErrorCode.HTTP_429
    if 400 <= status < 500:
        return ErrorCode.HTTP_4XX
    if status >= 500:
        return ErrorCode.HTTP_5XX
    return ErrorCode.INTERNAL


__all__ = [
    "ALL_ERROR_KINDS",
    "ErrorCode",
    "ErrorKind",
    "ScrapeError",
    "classify_http_status",
]
