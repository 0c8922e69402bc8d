"""Value types shared by the scraper stages."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Mapping, Optional, Tuple

from .error_codes import ScrapeError


@dataclass(frozen=True)
class SessionContext:
    """Cookies and anti-forgery token obtained once per run."""

    cookie_header: str
    anti_forgery_token: str

    def __repr__(self) -> str:
        return "SessionContext(cookie_header=<redacted>, anti_forgery_token=<redacted>)"


@dataclass(frozen=True)
class ScrapeRequest:
    """Validated input for one scrape run.

    Built by ``validation.build_scrape_request``; the engine never re-checks it.
    """

    filed_start_date: date
    filed_end_date: date
    counties: Tuple[str, ...]
    concurrency: int


@dataclass(frozen=True)
class FetchJob:
    county: str
    filed_start_date: date
    filed_end_date: Optional[date]
    session: SessionContext = field(repr=False)


# Serialised field names, in output column order.
DOCKET_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("docket_id", "docketId"),
    ("court", "court"),
    ("caption", "caption"),
    ("status", "status"),
    ("filing_date", "filingDate"),
    ("primary_participants", "primaryParticipants"),
    ("dob", "dob"),
    ("county", "county"),
    ("court_office", "courtOffice"),
    ("police_incident_no", "policeIncidentNo"),
    ("docket_url", "docketUrl"),
)


@dataclass(frozen=True)
class DocketRecord:
    docket_id: str
    court: str
    caption: str
    status: str
    filing_date: str
    primary_participants: str
    dob: str
    county: str
    court_office: str
    police_incident_no: str
    docket_url: str

    def as_dict(self) -> Dict[str, str]:
        """Return the record keyed by its published (camelCase) field names."""

        return {public: getattr(self, attr) for attr, public in DOCKET_FIELDS}


@dataclass(frozen=True)
class JobOutcome:
    """Result of one fetch job: either records or an error, never both."""

    county: str
    records: Tuple[DocketRecord, ...] = ()
    error: Optional[ScrapeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, county: str, records: Tuple[DocketRecord, ...]) -> "JobOutcome":
        return cls(county=county, records=tuple(records))

    @classmethod
    def failure(cls, county: str, error: ScrapeError) -> "JobOutcome":
        return cls(county=county, error=error)


@dataclass(frozen=True)
class HttpRequest:
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    # Multipart form fields, sent as ``files=`` so requests encodes multipart/form-data.
    form_fields: Optional[Tuple[Tuple[str, str], ...]] = None
    timeout: Optional[float] = None


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    reason: str
    text: str
    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: Tuple[Tuple[str, str], ...] = ()


__all__ = [
    "DOCKET_FIELDS",
    "DocketRecord",
    "FetchJob",
    "HttpRequest",
    "JobOutcome",
    "RawResponse",
    "ScrapeRequest",
    "SessionContext",
]
