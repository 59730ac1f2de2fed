"""Integration tests for the merge-then-archive workflow."""

from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path

import tickmerge
from core.config import TickMergeConfig
from ingest.pipeline import run_pipeline
from tests.fixture_paths import copy_fixture_dir, fixture_path


def _count_data_rows(source_path: Path) -> int:
    with source_path.open("r", encoding="utf-8", newline="") as handle:
        return sum(1 for row in csv.reader(handle) if row) - 1


def test_two_ticker_run_produces_tagged_extract_and_clean_input(tmp_path: Path) -> None:
    """AAPL and MSFT merge into one tagged extract and both move to the batch."""
    input_dir = copy_fixture_dir("tickers_basic", tmp_path / "datin")
    options = TickMergeConfig(
        input_dir=input_dir,
        output_dir=tmp_path / "datout",
        log_dir=tmp_path / "datlog",
        archive_dir=tmp_path / "arch",
    ).require_pipeline_options()

    result = run_pipeline(options, clock=lambda: datetime(2020, 1, 2, 3, 4, 5))

    assert result.archive is not None
    archived_extract = result.archive.merged_file_path
    assert archived_extract.read_text(encoding="utf-8").splitlines() == [
        "date,price,tick_nm",
        "2020-01-01,100,AAPL",
        "2020-01-02,200,MSFT",
    ]
    assert (result.archive.archive_dir / "AAPL.csv").exists()
    assert (result.archive.archive_dir / "MSFT.csv").exists()
    assert list(input_dir.iterdir()) == []
    assert list((tmp_path / "datout").iterdir()) == []


def test_merged_row_count_matches_source_rows(tmp_path: Path) -> None:
    """Merged data rows equal the sum of data rows in contributing files."""
    input_dir = copy_fixture_dir("tickers_mixed", tmp_path / "datin")
    expected_rows = sum(
        _count_data_rows(fixture_path(f"tickers_mixed/{name}"))
        for name in ("AAPL.csv", "WIDE.csv", "nested/TSLA.CSV")
    )
    options = TickMergeConfig(
        input_dir=input_dir,
        output_dir=tmp_path / "datout",
        log_dir=tmp_path / "datlog",
        archive_dir=tmp_path / "arch",
    ).require_pipeline_options()

    result = tickmerge.run_pipeline(options)

    assert result.merge is not None and result.archive is not None
    archived_rows = _count_data_rows(result.archive.merged_file_path)
    assert result.merge.rows_written == archived_rows == expected_rows
    assert (input_dir / "nested" / "TSLA.CSV").exists()
