from __future__ import annotations

"""County names accepted by the portal's ``County`` search field.

The values are sent verbatim in the search form, so spelling and case must
match the portal's own option list.
"""

ALL_COUNTIES: tuple[str, ...] = (
    "Adams",
    "Allegheny",
    "Armstrong",
    "Beaver",
    "Bedford",
    "Berks",
    "Blair",
    "Bradford",
    "Bucks",
    "Butler",
    "Cambria",
    "Cameron",
    "Carbon",
    "Centre",
    "Chester",
    "Clarion",
    "Clearfield",
    "Clinton",
    "Columbia",
    "Crawford",
    "Cumberland",
    "Dauphin",
    "Delaware",
    "Elk",
    "Erie",
    "Fayette",
    "Forest",
    "Franklin",
    "Fulton",
    "Greene",
    "Huntingdon",
    "Indiana",
    "Jefferson",
    "Juniata",
    "Lackawanna",
    "Lancaster",
    "Lawrence",
    "Lebanon",
    "Lehigh",
    "Luzerne",
    "Lycoming",
    "McKean",
    "Mercer",
    "Mifflin",
    "Monroe",
    "Montgomery",
    "Montour",
    "Northampton",
    "Northumberland",
    "Perry",
    "Philadelphia",
    "Pike",
    "Potter",
    "Schuylkill",
    "Snyder",
    "Somerset",
    "Sullivan",
    "Susquehanna",
    "Tioga",
    "Union",
    "Venango",
    "Warren",
    "Washington",
    "Wayne",
    "Westmoreland",
    "Wyoming",
    "York",
)

ALL_COUNTIES_SENTINELS = {"*", "all"}

_BY_LOWER = {name.lower(): name for name in ALL_COUNTIES}


def canonical_county(value: str | None) -> str | None:
    """Return the portal spelling of ``value`` or ``None`` if it is unknown."""

    if not value:
        return None
    return _BY_LOWER.get(value.strip().lower())


def is_all_counties(value: object) -> bool:
    return isinstance(value, str) and value.strip().lower() in ALL_COUNTIES_SENTINELS


__all__ = [
    "ALL_COUNTIES",
    "ALL_COUNTIES_SENTINELS",
    "canonical_county",
    "is_all_counties",
]
