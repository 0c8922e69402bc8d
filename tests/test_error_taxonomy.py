import pytest

from ujsdockets.scraper.error_codes import (
    ALL_ERROR_KINDS,
    ErrorCode,
    ErrorKind,
    ScrapeError,
    classify_http_status,
)


@pytest.mark.parametrize(
    "status, expected",
    [
        (401, ErrorCode.HTTP_401),
        (403, ErrorCode.HTTP_403),
        (404, ErrorCode.HTTP_404),
        (429, ErrorCode.HTTP_429),
        (400, ErrorCode.HTTP_4XX),
        (500, ErrorCode.HTTP_5XX),
        (503, ErrorCode.HTTP_5XX),
        (302, ErrorCode.INTERNAL),
        (None, ErrorCode.INTERNAL),
    ],
)
def test_classify_http_status(status, expected) -> None:  # noqa: ANN001
    assert classify_http_status(status) == expected


def test_kinds_are_closed_set() -> None:
    assert set(ALL_ERROR_KINDS) == {"validation", "session", "http", "extraction", "internal"}
    with pytest.raises(ValueError):
        ScrapeError("timeout", "not a kind")


def test_with_county_keeps_fields_and_chains() -> None:
    original = ScrapeError(ErrorKind.HTTP, "Bad Gateway", status_code=502)

    attributed = original.with_county("Lehigh")

    assert attributed is not original
    assert attributed.kind == ErrorKind.HTTP
    assert attributed.status_code == 502
    assert attributed.county == "Lehigh"
    assert attributed.__cause__ is original
    assert original.county is None


def test_with_same_county_returns_self() -> None:
    error = ScrapeError(ErrorKind.EXTRACTION, "table missing", county="Erie")

    assert error.with_county("Erie") is error


def test_str_includes_county_and_status() -> None:
    error = ScrapeError(ErrorKind.HTTP, "Service Unavailable", status_code=503, county="Bucks")

    assert str(error) == "[http county=Bucks status=503] Service Unavailable"
    assert str(ScrapeError(ErrorKind.VALIDATION, "bad date")) == "[validation] bad date"
