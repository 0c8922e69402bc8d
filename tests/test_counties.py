from ujsdockets.scraper.counties import ALL_COUNTIES, canonical_county, is_all_counties


def test_all_sixty_seven_counties_listed_once() -> None:
    assert len(ALL_COUNTIES) == 67
    assert len(set(ALL_COUNTIES)) == 67
    assert list(ALL_COUNTIES) == sorted(ALL_COUNTIES)


def test_canonical_county_is_case_insensitive() -> None:
    assert canonical_county("mckean") == "McKean"
    assert canonical_county("  Northumberland ") == "Northumberland"
    assert canonical_county("Gotham") is None
    assert canonical_county("") is None


def test_all_counties_sentinels() -> None:
    assert is_all_counties("*")
    assert is_all_counties("All")
    assert not is_all_counties("Allegheny")
    assert not is_all_counties(["*"])
