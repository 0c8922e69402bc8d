from __future__ import annotations

from pathlib import Path

import pytest

from ujsdockets.scraper import parser
from ujsdockets.scraper.error_codes import ErrorKind, ScrapeError
from ujsdockets.scraper.models import DocketRecord

DATA_DIR = Path(__file__).parent / "data"


def _fixture(name: str) -> str:
    return (DATA_DIR / name).read_text(encoding="utf-8")


def _row(
    docket_id: str,
    court: str = "Magisterial District",
    *,
    filing_date: str = "03/04/2024",
    dob: str = "07/15/1990",
    participants: str = "Doe, Jane",
    href: str | None = "/Report/MdjDocketSheet?docketNumber=X",
) -> str:
    cells = ["", "", docket_id, court, "Comm. v. Doe", "Active", filing_date, participants, dob,
             "Bucks", "MDJ 07-1-01", "", "", "INC-1", "", "", "", ""]
    link = f'<div><a href="{href}">Docket Sheet</a></div>' if href else "<div></div>"
    tds = "".join(f"<td>{value}</td>" for value in cells) + f"<td>{link}</td>"
    return f"<tr>{tds}</tr>"


def _page(*rows: str) -> str:
    return (
        '<html><body><div class="table-wrapper"><table><tbody>'
        + "".join(rows)
        + "</tbody></table></div></body></html>"
    )


def test_sample_page_yields_two_unique_criminal_dockets() -> None:
    records = parser.extract_dockets(_fixture("results_sample.html"), county="Allegheny")

    assert [record.docket_id for record in records] == [
        "MJ-05201-CR-0000123-2024",
        "MJ-31103-CR-0000200-2024",
    ]


def test_sample_page_record_fields_are_normalised() -> None:
    first = parser.extract_dockets(_fixture("results_sample.html"))[0]

    assert first == DocketRecord(
        docket_id="MJ-05201-CR-0000123-2024",
        court="Magisterial District",
        caption="Comm. v. Smith, John",
        status="Active",
        filing_date="2024-03-04",
        primary_participants="Smith, John",
        dob="1990-07-15",
        county="Allegheny",
        court_office="MDJ 05-2-01",
        police_incident_no="2024-00123",
        docket_url=(
            "https://ujsportal.pacourts.us/Report/MdjDocketSheet"
            "?docketNumber=MJ-05201-CR-0000123-2024&dnh=abc"
        ),
    )


def test_every_record_passes_court_and_id_filter() -> None:
    records = parser.extract_dockets(_fixture("results_sample.html"))

    assert records
    for record in records:
        assert record.court == "Magisterial District"
        assert parser.is_criminal_docket_id(record.docket_id)


def test_missing_results_table_is_extraction_error() -> None:
    with pytest.raises(ScrapeError) as excinfo:
        parser.extract_dockets(_fixture("no_results_table.html"), county="Erie")

    assert excinfo.value.kind == ErrorKind.EXTRACTION
    assert excinfo.value.county == "Erie"


def test_empty_table_yields_no_records() -> None:
    assert parser.extract_dockets(_fixture("empty_results.html")) == []


@pytest.mark.parametrize(
    "docket_id, expected",
    [
        ("MJ-05201-CR-0000123-2024", True),
        ("MJ-1234-CR-1234-2024", True),
        ("MJ-123456-CR-12345678-2024", True),
        ("MJ-123-CR-0000123-2024", False),
        ("MJ-1234567-CR-0000123-2024", False),
        ("MJ-05201-CR-123-2024", False),
        ("MJ-05201-CR-123456789-2024", False),
        ("MJ-05201-NT-0000123-2024", False),
        ("mj-05201-CR-0000123-2024", False),
        ("MJ-05201-CR-0000123-24", False),
        ("", False),
    ],
)
def test_criminal_docket_id_shape(docket_id: str, expected: bool) -> None:
    assert parser.is_criminal_docket_id(docket_id) is expected


def test_malformed_date_rejects_row_without_failing_page(monkeypatch: pytest.MonkeyPatch) -> None:
    events: list[dict] = []
    monkeypatch.setattr(parser, "_scraper_event", lambda *args, **kwargs: events.append(kwargs))
    markup = _page(
        _row("MJ-07101-CR-0000001-2024", filing_date="2024-03-04"),
        _row("MJ-07101-CR-0000002-2024", dob="13/45/1990"),
        _row("MJ-07101-CR-0000003-2024"),
    )

    records = parser.extract_dockets(markup, county="Bucks")

    assert [record.docket_id for record in records] == ["MJ-07101-CR-0000003-2024"]
    rejected = [event for event in events if event.get("kind") == "row_rejected"]
    assert [event["docket_id"] for event in rejected] == [
        "MJ-07101-CR-0000001-2024",
        "MJ-07101-CR-0000002-2024",
    ]


def test_row_without_detail_link_is_rejected() -> None:
    markup = _page(_row("MJ-07101-CR-0000004-2024", href=None))

    assert parser.extract_dockets(markup) == []


def test_short_rows_are_skipped() -> None:
    markup = _page("<tr><td>only</td><td>two</td></tr>", _row("MJ-07101-CR-0000005-2024"))

    records = parser.extract_dockets(markup)

    assert [record.docket_id for record in records] == ["MJ-07101-CR-0000005-2024"]


def test_page_order_is_preserved() -> None:
    markup = _page(
        _row("MJ-07101-CR-0000009-2024", participants="Zed, A"),
        _row("MJ-07101-CR-0000008-2024", participants="Abe, B"),
    )

    records = parser.extract_dockets(markup)

    assert [record.primary_participants for record in records] == ["Zed, A", "Abe, B"]


def test_parse_token_reads_hidden_input() -> None:
    assert parser.parse_token(_fixture("landing_page.html")) == "CfDJ8Token-abc123"


def test_parse_token_missing_returns_none() -> None:
    assert parser.parse_token("<html><body><form></form></body></html>") is None
    assert parser.parse_token('<input name="__RequestVerificationToken" value="">') is None


def test_dedupe_by_docket_id_keeps_first() -> None:
    def make(docket_id: str, caption: str) -> DocketRecord:
        return DocketRecord(docket_id, "Magisterial District", caption, "", "", "", "", "", "", "", "")

    unique, dropped = parser.dedupe_by_docket_id(
        [make("A", "first"), make("B", "b"), make("A", "second")]
    )

    assert [(record.docket_id, record.caption) for record in unique] == [("A", "first"), ("B", "b")]
    assert dropped == 1
