from __future__ import annotations

from itertools import chain
from typing import Iterable, List, Sequence

from .logging_utils import _scraper_event
from .models import DocketRecord
from .parser import dedupe_by_docket_id


def merge(partials: Iterable[Sequence[DocketRecord]]) -> List[DocketRecord]:
    """Combine per-county outputs into the final record list.

    Records are deduplicated by docket id (first seen wins) and sorted by
    primary participant name using plain code-point comparison, so the
    result does not depend on the order in which counties completed.
    """

    combined = list(chain.from_iterable(partials))
    unique, duplicates = dedupe_by_docket_id(combined)
    if duplicates:
        _scraper_event(
            "merge",
            kind="duplicates_removed",
            duplicates=duplicates,
            kept=len(unique),
        )
    merged = sorted(unique, key=lambda record: record.primary_participants)
    _scraper_event("merge", kind="summary", input=len(combined), output=len(merged))
    return merged


__all__ = ["merge"]
