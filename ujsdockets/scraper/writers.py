from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Optional, Sequence

from . import config
from .models import DOCKET_FIELDS, DocketRecord
from .utils import log_line, save_json_file

CSV_HEADER = [public for _, public in DOCKET_FIELDS]


def dockets_to_csv(records: Sequence[DocketRecord]) -> str:
    """Render records as CSV text with a camelCase header row."""

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_HEADER, lineterminator="\n")
    writer.writeheader()
    for record in records:
        writer.writerow(record.as_dict())
    return buffer.getvalue()


def write_json(records: Sequence[DocketRecord], output_dir: Path) -> Path:
    path = Path(output_dir) / config.JSON_FILENAME
    save_json_file(path, [record.as_dict() for record in records])
    log_line(f"Saved dockets as JSON to: {path}")
    return path


def write_csv(records: Sequence[DocketRecord], output_dir: Path) -> Path:
    path = Path(output_dir) / config.CSV_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(dockets_to_csv(records))
    log_line(f"Saved dockets as CSV to: {path}")
    return path


def write_outputs(records: Sequence[DocketRecord], output_dir: Path) -> Optional[dict[str, Path]]:
    """Write JSON and CSV files; write nothing when there are no records."""

    if not records:
        log_line("No dockets found for the provided date range.")
        return None
    return {
        "json": write_json(records, output_dir),
        "csv": write_csv(records, output_dir),
    }


__all__ = ["CSV_HEADER", "dockets_to_csv", "write_csv", "write_json", "write_outputs"]
