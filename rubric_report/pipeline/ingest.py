from __future__ import annotations

import csv
from pathlib import Path
from typing import List

from .rubric import Level, RubricRecord, record_from_row


REQUIRED_COLUMNS = {"domain", "indicators"} | {level.column for level in Level}


def load_rows(csv_path: Path) -> List[dict]:
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV not found: {csv_path}")
    with csv_path.open("r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if reader.fieldnames is None:
            raise ValueError("CSV has no header")
        fieldnames = {name.strip() for name in reader.fieldnames if name}
        missing = REQUIRED_COLUMNS - fieldnames
        if missing:
            raise ValueError(f"CSV missing columns: {', '.join(sorted(missing))}")
        rows = [
            {(key or "").strip(): value for key, value in row.items()}
            for row in reader
            if any((value or "").strip() for value in row.values() if isinstance(value, str))
        ]
    return rows


def load_rubric(csv_path: Path) -> List[RubricRecord]:
    """Rows without a domain are kept; the content builder skips them."""
    return [record_from_row(row) for row in load_rows(csv_path)]
