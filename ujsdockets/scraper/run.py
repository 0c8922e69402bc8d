"""Scraper for newly filed criminal dockets on the PA UJS portal.

Workflow:

- Validate the requested filed-date range and counties.
- GET https://ujsportal.pacourts.us/CaseSearch once to obtain the session
  cookies and the ``__RequestVerificationToken`` anti-forgery token.
- POST one "search by date filed" request per county, at most
  ``concurrency`` at a time, retrying transient failures.
- Parse each results table, keep Magisterial District criminal dockets,
  merge the counties' outputs, deduplicate by docket number and sort by
  participant name.
- Write dockets.json / dockets.csv and a per-run summary.

Any county failure aborts the run (fail-fast); nothing is written then.
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from . import config
from .config_validation import validate_runtime_config
from .counties import ALL_COUNTIES
from .county_fetcher import CountyFetcher
from .date_utils import default_start_date, format_summary_time, portal_now
from .error_codes import ErrorKind, ScrapeError
from .logging_utils import _scraper_event
from .merger import merge
from .models import DocketRecord, FetchJob, ScrapeRequest
from .parser import extract_dockets
from .scheduler import ConcurrencyScheduler
from .session import SessionBootstrapper
from .telemetry import RunTelemetry
from .transport import RetryingTransport, build_http_session
from .utils import log_line, log_warning, setup_run_logger
from .validation import CountySelector, DateInput, build_scrape_request
from .writers import write_outputs


async def scrape_async(
    request: ScrapeRequest,
    *,
    transport: Optional[RetryingTransport] = None,
    telemetry: Optional[RunTelemetry] = None,
) -> List[DocketRecord]:
    """Run one complete scrape for an already-validated request."""

    transport = transport or RetryingTransport(build_http_session(request.concurrency))

    log_line("Getting UJS portal cookies and token...")
    session = await SessionBootstrapper(transport).bootstrap()
    log_line("Got UJS portal cookies and token")

    fetcher = CountyFetcher(transport)

    async def _handle(job: FetchJob) -> List[DocketRecord]:
        log_line(f"Getting docket data for {job.county}...")
        markup = await fetcher.fetch(job)
        return extract_dockets(markup, county=job.county)

    jobs = [
        FetchJob(
            county=county,
            filed_start_date=request.filed_start_date,
            filed_end_date=request.filed_end_date,
            session=session,
        )
        for county in request.counties
    ]
    scheduler = ConcurrencyScheduler(
        request.concurrency,
        on_outcome=telemetry.record_outcome if telemetry is not None else None,
    )
    partials = await scheduler.run(jobs, _handle)
    return merge(partials)


def scrape(
    request: ScrapeRequest,
    *,
    transport: Optional[RetryingTransport] = None,
    telemetry: Optional[RunTelemetry] = None,
) -> List[DocketRecord]:
    """Blocking wrapper around :func:`scrape_async`."""

    return asyncio.run(scrape_async(request, transport=transport, telemetry=telemetry))


def _describe_counties(counties: Sequence[str]) -> str:
    if tuple(counties) == ALL_COUNTIES:
        return f"Scraping all {len(ALL_COUNTIES)} counties"
    return f"Scraping the following counties: {', '.join(counties)}"


def run_scrape(
    filed_start_date: DateInput = None,
    filed_end_date: DateInput = None,
    counties: CountySelector = "*",
    *,
    concurrency: Optional[int] = None,
    output_dir: Path | str = ".",
    transport: Optional[RetryingTransport] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Public entrypoint: validate, scrape, write files and a run summary."""

    setup_run_logger()
    start_time = portal_now()
    log_line(f"Scrape begin: {format_summary_time(start_time)}")

    if not filed_start_date:
        filed_start_date = default_start_date()

    request = build_scrape_request(
        filed_start_date,
        filed_end_date,
        counties,
        concurrency,
        today=today,
    )
    log_line(
        f"Scraping dockets between {request.filed_start_date.isoformat()} "
        f"and {request.filed_end_date.isoformat()}..."
    )
    log_line(_describe_counties(request.counties))

    telemetry = RunTelemetry(
        {
            "filed_start_date": request.filed_start_date.isoformat(),
            "filed_end_date": request.filed_end_date.isoformat(),
            "counties": list(request.counties),
            "concurrency": request.concurrency,
        }
    )

    try:
        dockets = scrape(request, transport=transport, telemetry=telemetry)
    except ScrapeError as exc:
        _scraper_event(
            "error",
            phase="run",
            kind=exc.kind,
            county=exc.county,
            status_code=exc.status_code,
            message=exc.message,
        )
        try:
            telemetry.finalize(
                {
                    "error": {
                        "kind": exc.kind,
                        "county": exc.county,
                        "status_code": exc.status_code,
                        "message": exc.message,
                    }
                }
            )
        except OSError as write_exc:
            log_warning(f"[RUN] Unable to write run summary: {write_exc}")
        raise

    outputs = write_outputs(dockets, Path(output_dir))

    end_time = portal_now()
    duration_seconds = int((end_time - start_time).total_seconds())
    log_line(f"Scrape end: {format_summary_time(end_time)}")
    log_line(f"Total crim dockets found: {len(dockets)}")
    log_line(f"Scrape duration: {duration_seconds} seconds")

    result: Dict[str, Any] = {
        "dockets": len(dockets),
        "filed_start_date": request.filed_start_date.isoformat(),
        "filed_end_date": request.filed_end_date.isoformat(),
        "counties": len(request.counties),
        "duration_seconds": duration_seconds,
        "json_path": str(outputs["json"]) if outputs else None,
        "csv_path": str(outputs["csv"]) if outputs else None,
    }
    try:
        result["summary_path"] = str(telemetry.finalize(result))
    except OSError as exc:
        log_warning(f"[RUN] Unable to write run summary: {exc}")
    result["records"] = dockets
    return result


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scrape newly filed criminal dockets from the PA UJS portal.",
    )
    parser.add_argument(
        "--start-date",
        default=None,
        help="First filed date, YYYY-MM-DD. Defaults to yesterday (America/New_York).",
    )
    parser.add_argument(
        "--end-date",
        default=None,
        help="Last filed date, YYYY-MM-DD. Defaults to the start date.",
    )
    parser.add_argument(
        "--counties",
        default="*",
        help="Comma-separated county names, or '*' / 'all' for every county.",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=config.DEFAULT_CONCURRENCY,
        help="Maximum number of county searches in flight.",
    )
    parser.add_argument(
        "--output-dir",
        default=".",
        help="Directory for dockets.json and dockets.csv.",
    )
    return parser


def _cli_entrypoint(argv: Optional[List[str]] = None) -> int:
    # Clamp env knobs first; the parser reads its defaults from config.
    validate_runtime_config("cli")

    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        run_scrape(
            args.start_date,
            args.end_date,
            args.counties,
            concurrency=args.concurrency,
            output_dir=args.output_dir,
        )
    except ScrapeError as exc:
        if exc.kind == ErrorKind.VALIDATION:
            log_line(f"[RUN] Invalid input: {exc.message}")
        else:
            log_line(f"[RUN] Scrape failed: {exc}")
        return 1
    return 0


def main() -> None:  # pragma: no cover - CLI entry
    raise SystemExit(_cli_entrypoint())


__all__ = ["run_scrape", "scrape", "scrape_async", "_cli_entrypoint", "main"]


if __name__ == "__main__":  # pragma: no cover
    main()
