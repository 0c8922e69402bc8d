from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence

from . import config
from .error_codes import ErrorKind, ScrapeError
from .logging_utils import _scraper_event
from .models import DocketRecord, FetchJob, JobOutcome

JobHandler = Callable[[FetchJob], Awaitable[Sequence[DocketRecord]]]
OutcomeCallback = Callable[[JobOutcome], None]


class _FailFast(Exception):
    """Internal signal raised by a worker whose job failed."""

    def __init__(self, outcome: JobOutcome) -> None:
        super().__init__(outcome.county)
        self.outcome = outcome


class ConcurrencyScheduler:
    """
    Bounded asyncio worker pool for county jobs.

    - At most ``concurrency`` jobs are in flight; jobs are admitted in FIFO order.
    - Successful outputs land in a collector owned by ``run`` and are returned
      in completion order once every admitted job has finished.
    - Fail-fast: the first failed job ends the run with its error. No further
      job is admitted and the other in-flight workers are cancelled. A request
      already running in a worker thread finishes in the background and its
      response is discarded.
    """

    def __init__(
        self,
        concurrency: int = config.DEFAULT_CONCURRENCY,
        *,
        on_outcome: Optional[OutcomeCallback] = None,
    ) -> None:
        self._concurrency = max(1, concurrency)
        self._on_outcome = on_outcome
        self._in_flight = 0
        self._peak_in_flight = 0

    @property
    def concurrency(self) -> int:
        return self._concurrency

    @property
    def peak_in_flight(self) -> int:
        return self._peak_in_flight

    async def _run_job(self, job: FetchJob, handler: JobHandler) -> JobOutcome:
        self._in_flight += 1
        self._peak_in_flight = max(self._peak_in_flight, self._in_flight)
        try:
            records = await handler(job)
        except ScrapeError as exc:
            return JobOutcome.failure(job.county, exc.with_county(job.county))
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            error = ScrapeError(
                ErrorKind.INTERNAL,
                f"{type(exc).__name__}: {exc}",
                county=job.county,
            )
            error.__cause__ = exc
            return JobOutcome.failure(job.county, error)
        finally:
            self._in_flight -= 1
        return JobOutcome.success(job.county, tuple(records))

    async def _worker(
        self,
        queue: "asyncio.Queue[FetchJob]",
        handler: JobHandler,
        collector: List[List[DocketRecord]],
        failures: List[JobOutcome],
    ) -> None:
        while not failures:
            try:
                job = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            outcome = await self._run_job(job, handler)
            if self._on_outcome is not None:
                self._on_outcome(outcome)
            if outcome.error is not None:
                failures.append(outcome)
                raise _FailFast(outcome)
            collector.append(list(outcome.records))
            _scraper_event(
                "scheduler",
                kind="job_done",
                county=outcome.county,
                records=len(outcome.records),
                remaining=queue.qsize(),
            )

    async def run(self, jobs: Sequence[FetchJob], handler: JobHandler) -> List[List[DocketRecord]]:
        """Run ``handler`` over ``jobs`` and return per-job outputs.

        Raises the first failing job's ``ScrapeError``.
        """

        collector: List[List[DocketRecord]] = []
        if not jobs:
            return collector

        queue: "asyncio.Queue[FetchJob]" = asyncio.Queue()
        for job in jobs:
            queue.put_nowait(job)

        failures: List[JobOutcome] = []
        worker_count = min(self._concurrency, len(jobs))
        workers = [
            asyncio.create_task(self._worker(queue, handler, collector, failures))
            for _ in range(worker_count)
        ]
        _scraper_event(
            "scheduler",
            kind="start",
            jobs=len(jobs),
            workers=worker_count,
            concurrency=self._concurrency,
        )

        try:
            done, pending = await asyncio.wait(workers, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            for task in workers:
                task.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            raise

        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        unexpected: Optional[BaseException] = None
        for task in done:
            if task.cancelled():
                continue
            exc = task.exception()
            if exc is not None and not isinstance(exc, _FailFast) and unexpected is None:
                unexpected = exc

        _scraper_event(
            "scheduler",
            kind="summary",
            jobs=len(jobs),
            completed=len(collector),
            failed=len(failures),
            cancelled=len(pending),
            peak_in_flight=self._peak_in_flight,
            concurrency=self._concurrency,
        )

        first_error = failures[0].error if failures else None
        if first_error is not None:
            raise first_error
        if unexpected is not None:
            raise unexpected
        return collector


__all__ = ["ConcurrencyScheduler", "JobHandler"]
