from __future__ import annotations

import asyncio
from datetime import date

from tests.test_transport import _DummyResponse, _DummySession, _SleepRecorder
from ujsdockets.scraper import config
from ujsdockets.scraper.county_fetcher import CountyFetcher, build_search_form
from ujsdockets.scraper.models import FetchJob, SessionContext
from ujsdockets.scraper.transport import RetryingTransport

SESSION = SessionContext(cookie_header="ASP.NET_SessionId=abc", anti_forgery_token="tok-1")


def test_search_form_fields_in_order() -> None:
    fields = build_search_form("tok-1", "Centre", date(2024, 3, 4), date(2024, 3, 6))

    assert fields == (
        ("SearchBy", "DateFiled"),
        ("FiledStartDate", "2024-03-04"),
        ("FiledEndDate", "2024-03-06"),
        ("__RequestVerificationToken", "tok-1"),
        ("AdvanceSearch", "true"),
        ("County", "Centre"),
    )


def test_search_form_end_date_defaults_to_start() -> None:
    fields = dict(build_search_form("tok-1", "Centre", date(2024, 3, 4)))

    assert fields["FiledEndDate"] == "2024-03-04"


def test_build_request_carries_session_cookie() -> None:
    fetcher = CountyFetcher(RetryingTransport(_DummySession()), search_url="https://portal.example/CaseSearch")
    job = FetchJob("Blair", date(2024, 3, 4), None, SESSION)

    request = fetcher.build_request(job)

    assert request.method == "POST"
    assert request.url == "https://portal.example/CaseSearch"
    assert request.headers["cookie"] == "ASP.NET_SessionId=abc"
    assert request.headers["user-agent"] == config.USER_AGENT
    assert request.headers["accept"] == "*/*"
    assert ("County", "Blair") in request.form_fields


def test_fetch_returns_markup_and_posts_multipart() -> None:
    session = _DummySession(_DummyResponse(200, "<table></table>"))
    fetcher = CountyFetcher(
        RetryingTransport(session, max_attempts=1, sleep=_SleepRecorder()),
        search_url="https://portal.example/CaseSearch",
    )
    job = FetchJob("Blair", date(2024, 3, 4), date(2024, 3, 5), SESSION)

    markup = asyncio.run(fetcher.fetch(job))

    assert markup == "<table></table>"
    files = dict(session.calls[0]["files"])
    assert files["County"] == (None, "Blair")
    assert files["__RequestVerificationToken"] == (None, "tok-1")
    assert files["FiledEndDate"] == (None, "2024-03-05")


def test_fetch_job_repr_hides_session() -> None:
    job = FetchJob("Blair", date(2024, 3, 4), None, SESSION)

    assert "abc" not in repr(job)
    assert "tok-1" not in repr(job)
