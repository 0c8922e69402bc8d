"""HTML parsing for the UJS portal CaseSearch pages."""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag

from . import config
from .date_utils import portal_to_iso
from .error_codes import ErrorKind, ScrapeError
from .logging_utils import _scraper_event
from .models import DocketRecord

TOKEN_SELECTOR = 'input[name="__RequestVerificationToken"]'
RESULTS_TABLE_SELECTOR = "div.table-wrapper tbody"
DETAIL_LINK_SELECTOR = "td:nth-child(19) div:nth-child(1) a"

# 0-based <td> positions within a results row.
COL_DOCKET_ID = 2
COL_COURT = 3
COL_CAPTION = 4
COL_STATUS = 5
COL_FILING_DATE = 6
COL_PARTICIPANTS = 7
COL_DOB = 8
COL_COUNTY = 9
COL_COURT_OFFICE = 10
COL_INCIDENT_NO = 13

_CRIMINAL_DOCKET_RE = re.compile(rf"^{config.CRIMINAL_DOCKET_PATTERN}$")


def _soup(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup or "", "html5lib")


def parse_token(markup: str) -> Optional[str]:
    """Return the anti-forgery token value from the landing page, if present."""

    element = _soup(markup).select_one(TOKEN_SELECTOR)
    if element is None:
        return None
    value = element.get("value")
    return str(value) if value else None


def is_criminal_docket_id(docket_id: str) -> bool:
    return bool(_CRIMINAL_DOCKET_RE.match(docket_id or ""))


def _cell_text(cells: Sequence[Tag], index: int) -> str:
    return cells[index].get_text(strip=True)


def dedupe_by_docket_id(records: Iterable[DocketRecord]) -> Tuple[List[DocketRecord], int]:
    """Drop records whose ``docket_id`` was already seen; keep the first.

    Returns the unique records in input order and the number dropped.
    """

    seen: set[str] = set()
    unique: List[DocketRecord] = []
    dropped = 0
    for record in records:
        if record.docket_id in seen:
            dropped += 1
            continue
        seen.add(record.docket_id)
        unique.append(record)
    return unique, dropped


def _build_record(row: Tag, cells: Sequence[Tag], docket_id: str, court: str) -> DocketRecord:
    """Build a record from a row that passed the court/id filter.

    Raises ``ValueError`` when the row lacks a column or link, or carries a
    date that is not ``MM/DD/YYYY``.
    """

    if len(cells) <= COL_INCIDENT_NO:
        raise ValueError(f"row has {len(cells)} cells, expected at least {COL_INCIDENT_NO + 1}")

    link = row.select_one(DETAIL_LINK_SELECTOR)
    href = link.get("href") if link is not None else None
    if not href:
        raise ValueError("detail link missing")

    return DocketRecord(
        docket_id=docket_id,
        court=court,
        caption=_cell_text(cells, COL_CAPTION),
        status=_cell_text(cells, COL_STATUS),
        filing_date=portal_to_iso(_cell_text(cells, COL_FILING_DATE)),
        primary_participants=_cell_text(cells, COL_PARTICIPANTS),
        dob=portal_to_iso(_cell_text(cells, COL_DOB)),
        county=_cell_text(cells, COL_COUNTY),
        court_office=_cell_text(cells, COL_COURT_OFFICE),
        police_incident_no=_cell_text(cells, COL_INCIDENT_NO),
        docket_url=f"{config.SITE_ORIGIN}{href}",
    )


def extract_dockets(markup: str, *, county: Optional[str] = None) -> List[DocketRecord]:
    """Parse one page of search results into criminal MDJ docket records.

    Only rows whose court column reads "Magisterial District" and whose docket
    number has the criminal shape are kept. A missing results table means the
    page layout changed and raises ``ScrapeError(kind="extraction")``.
    """

    table = _soup(markup).select_one(RESULTS_TABLE_SELECTOR)
    if table is None:
        raise ScrapeError(
            ErrorKind.EXTRACTION,
            f"Expected results table ({RESULTS_TABLE_SELECTOR}) missing from search response",
            county=county,
        )

    rows = table.find_all("tr", recursive=False)
    records: List[DocketRecord] = []
    rejected = 0
    for row_index, row in enumerate(rows):
        cells = row.find_all("td", recursive=False)
        if len(cells) <= COL_COURT:
            continue
        docket_id = _cell_text(cells, COL_DOCKET_ID)
        court = _cell_text(cells, COL_COURT)
        if court != config.MAGISTERIAL_DISTRICT or not is_criminal_docket_id(docket_id):
            continue
        try:
            records.append(_build_record(row, cells, docket_id, court))
        except ValueError as exc:
            rejected += 1
            _scraper_event(
                "warn",
                phase="extract",
                kind="row_rejected",
                county=county,
                row_index=row_index,
                docket_id=docket_id,
                reason=str(exc),
            )

    unique, duplicates = dedupe_by_docket_id(records)
    _scraper_event(
        "extract",
        county=county,
        rows=len(rows),
        criminal_dockets=len(records),
        rejected=rejected,
        duplicates=duplicates,
        returned=len(unique),
    )
    return unique


__all__ = [
    "dedupe_by_docket_id",
    "extract_dockets",
    "is_criminal_docket_id",
    "parse_token",
]
