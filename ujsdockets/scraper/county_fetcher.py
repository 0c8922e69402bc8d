from __future__ import annotations

from datetime import date
from typing import Optional, Tuple

from . import config
from .logging_utils import _scraper_event
from .models import FetchJob, HttpRequest
from .transport import RetryingTransport


def build_search_form(
    token: str,
    county: str,
    filed_start_date: date,
    filed_end_date: Optional[date] = None,
) -> Tuple[Tuple[str, str], ...]:
    """Return the CaseSearch multipart fields for a filed-date county search.

    The end date falls back to the start date when it is not set.
    """

    end = filed_end_date or filed_start_date
    return (
        ("SearchBy", "DateFiled"),
        ("FiledStartDate", filed_start_date.isoformat()),
        ("FiledEndDate", end.isoformat()),
        ("__RequestVerificationToken", token),
        ("AdvanceSearch", "true"),
        ("County", county),
    )


class CountyFetcher:
    """Run the date-filed search for one county and return the raw markup."""

    def __init__(self, transport: RetryingTransport, *, search_url: Optional[str] = None) -> None:
        self._transport = transport
        self._search_url = search_url or config.SEARCH_URL

    def build_request(self, job: FetchJob) -> HttpRequest:
        return HttpRequest(
            method="POST",
            url=self._search_url,
            headers={
                "accept": "*/*",
                "user-agent": config.USER_AGENT,
                "cookie": job.session.cookie_header,
            },
            form_fields=build_search_form(
                job.session.anti_forgery_token,
                job.county,
                job.filed_start_date,
                job.filed_end_date,
            ),
        )

    async def fetch(self, job: FetchJob) -> str:
        _scraper_event(
            "fetch",
            county=job.county,
            filed_start_date=job.filed_start_date.isoformat(),
            filed_end_date=(job.filed_end_date or job.filed_start_date).isoformat(),
        )
        response = await self._transport.execute(self.build_request(job), label=f"county:{job.county}")
        return response.text


__all__ = ["CountyFetcher", "build_search_form"]
