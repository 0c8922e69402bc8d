from __future__ import annotations

from ujsdockets.scraper.merger import merge
from ujsdockets.scraper.models import DocketRecord


def _record(docket_id: str, participants: str, county: str = "Adams") -> DocketRecord:
    return DocketRecord(
        docket_id=docket_id,
        court="Magisterial District",
        caption=f"Comm. v. {participants}",
        status="Active",
        filing_date="2024-03-04",
        primary_participants=participants,
        dob="1990-01-01",
        county=county,
        court_office="MDJ 51-3-01",
        police_incident_no="",
        docket_url=f"https://ujsportal.pacourts.us/Report?docketNumber={docket_id}",
    )


def test_merge_sorts_by_participant_name() -> None:
    merged = merge(
        [
            [_record("MJ-1", "Young, Pat")],
            [_record("MJ-2", "Adams, Lee"), _record("MJ-3", "Miller, Sam")],
        ]
    )

    assert [record.primary_participants for record in merged] == [
        "Adams, Lee",
        "Miller, Sam",
        "Young, Pat",
    ]


def test_merge_uses_code_point_order() -> None:
    merged = merge([[_record("MJ-1", "adams, lee"), _record("MJ-2", "Zane, Al"), _record("MJ-3", "Ángel, R")]])

    assert [record.primary_participants for record in merged] == ["Zane, Al", "adams, lee", "Ángel, R"]


def test_merge_drops_duplicate_docket_ids_across_counties() -> None:
    first = _record("MJ-05201-CR-0000123-2024", "Smith, John", county="Allegheny")
    repeat = _record("MJ-05201-CR-0000123-2024", "Smith, John", county="Butler")

    merged = merge([[first], [repeat, _record("MJ-9", "Brown, Ann")]])

    assert [record.docket_id for record in merged] == ["MJ-9", "MJ-05201-CR-0000123-2024"]
    assert merged[1].county == "Allegheny"


def test_merge_is_independent_of_completion_order() -> None:
    a = [_record("MJ-1", "Cole, B")]
    b = [_record("MJ-2", "Abel, C"), _record("MJ-3", "Baker, D")]

    assert merge([a, b]) == merge([b, a])


def test_merge_of_nothing_is_empty() -> None:
    assert merge([]) == []
    assert merge([[], []]) == []
