from __future__ import annotations

from typing import Iterable, Optional, Tuple

from . import config
from .error_codes import ErrorKind, ScrapeError
from .logging_utils import _scraper_event
from .models import HttpRequest, SessionContext
from .parser import parse_token
from .transport import RetryingTransport


def build_cookie_header(cookies: Iterable[Tuple[str, str]]) -> str:
    """Render received cookies as a ``Cookie`` request header value."""

    return "; ".join(f"{name}={value}" for name, value in cookies if name)


class SessionBootstrapper:
    """Fetch the CaseSearch landing page once and capture cookies + token."""

    def __init__(self, transport: RetryingTransport, *, search_url: Optional[str] = None) -> None:
        self._transport = transport
        self._search_url = search_url or config.SEARCH_URL

    async def bootstrap(self) -> SessionContext:
        _scraper_event("session", phase="bootstrap", kind="start", url=self._search_url)
        request = HttpRequest(
            method="GET",
            url=self._search_url,
            headers={"Accept": "text/html,*/*"},
        )
        # Transport failures propagate as kind="http" with the last status.
        response = await self._transport.execute(request, label="landing_page")

        token = parse_token(response.text)
        if not token:
            raise ScrapeError(
                ErrorKind.SESSION,
                "Anti-forgery token input (__RequestVerificationToken) missing from landing page",
                status_code=response.status_code,
            )

        cookie_header = build_cookie_header(response.cookies)
        _scraper_event(
            "session",
            phase="bootstrap",
            kind="ready",
            cookies=len(response.cookies),
            http_status=response.status_code,
        )
        return SessionContext(cookie_header=cookie_header, anti_forgery_token=token)


__all__ = ["SessionBootstrapper", "build_cookie_header"]
