from __future__ import annotations

import csv
import tempfile
from pathlib import Path

import pytest

from rubric_report.pipeline.ingest import load_rubric
from rubric_report.pipeline.rubric import Level

COLUMNS = ["domain", "indicators", "emerging", "developing", "embedding", "excelling"]


def _write(path: Path, rows: list[dict], fieldnames=COLUMNS) -> None:
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def test_load_rubric_keeps_rows_in_order() -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        path = Path(temp_dir) / "rubric.csv"
        _write(
            path,
            [
                {"domain": "Planning", "indicators": "Plans", "emerging": "e", "developing": "d", "embedding": "m", "excelling": "x"},
                {"domain": "", "indicators": "orphan", "emerging": "", "developing": "", "embedding": "", "excelling": ""},
                {"domain": " Assessment ", "indicators": "Checks", "emerging": "", "developing": "", "embedding": "", "excelling": "Top"},
            ],
        )
        records = load_rubric(path)
    assert [r.domain for r in records] == ["Planning", "", "Assessment"]
    assert records[0].description_for(Level.EMBEDDING) == "m"
    assert records[2].description_for(Level.EXCELLING) == "Top"
    assert records[2].description_for(Level.EMERGING) == ""
    assert records[2].description_for(None) == ""


def test_missing_columns_rejected() -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        path = Path(temp_dir) / "rubric.csv"
        _write(path, [{"domain": "Planning", "indicators": "x"}], fieldnames=["domain", "indicators"])
        with pytest.raises(ValueError, match="emerging"):
            load_rubric(path)


def test_missing_file() -> None:
    with pytest.raises(FileNotFoundError):
        load_rubric(Path("does-not-exist.csv"))


def test_level_parse() -> None:
    assert Level.parse("excelling") is Level.EXCELLING
    assert Level.parse("  Developing ") is Level.DEVELOPING
    assert Level.parse("") is None
    with pytest.raises(ValueError):
        Level.parse("Mastered")
