"""Per-run telemetry: one entry per county outcome, written as a JSON summary."""

from __future__ import annotations

import time
import uuid
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import config
from .models import JobOutcome
from .utils import save_json_file


def _ts() -> str:
    return time.strftime("%Y%m%d_%H%M%S")


class RunTelemetry:
    """Collect per-run county outcomes for the run summary file."""

    def __init__(self, params: Optional[Dict[str, Any]] = None, *, runs_dir: Optional[Path] = None) -> None:
        self.run_id = f"{_ts()}_{uuid.uuid4().hex[:8]}"
        self.params = dict(params or {})
        self.runs_dir = Path(runs_dir) if runs_dir is not None else config.RUNS_DIR
        self.started_at = time.time()
        self.entries: List[Dict[str, Any]] = []
        self.summary: Dict[str, Any] = defaultdict(int)

    def add(self, status: str, reason: str, meta: Dict[str, Any]) -> None:
        self.entries.append(
            {
                "status": status,
                "reason": reason,
                **meta,
            }
        )
        self.summary[f"count_{status}"] += 1

    def record_outcome(self, outcome: JobOutcome) -> None:
        if outcome.error is None:
            self.add("ok", "", {"county": outcome.county, "records": len(outcome.records)})
            return
        error = outcome.error
        self.add(
            "failed",
            error.kind,
            {
                "county": outcome.county,
                "status_code": error.status_code,
                "message": error.message,
            },
        )

    def finalize(self, extra: Optional[Dict[str, Any]] = None) -> Path:
        payload = {
            "run_id": self.run_id,
            "params": self.params,
            "started_at": self.started_at,
            "ended_at": time.time(),
            "summary": dict(self.summary),
            "entries": self.entries,
            **(extra or {}),
        }
        path = self.runs_dir / f"run_{self.run_id}.json"
        save_json_file(path, payload)
        return path


__all__ = ["RunTelemetry"]
