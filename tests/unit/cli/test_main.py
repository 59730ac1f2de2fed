"""Unit tests for CLI command handling."""

from __future__ import annotations

from pathlib import Path

import pytest

from cli.main import main
from tests.fixture_paths import copy_fixture_dir


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TICKMERGE_INPUT_DIR",
        "TICKMERGE_OUTPUT_DIR",
        "TICKMERGE_LOG_DIR",
        "TICKMERGE_ARCHIVE_DIR",
        "TICKMERGE_PROVENANCE_FIELD",
    ):
        monkeypatch.delenv(name, raising=False)


def test_cli_merges_and_archives(tmp_path: Path, monkeypatch, capsys) -> None:
    """CLI run should exit 0 and print the archive location."""
    _clear_env(monkeypatch)
    input_dir = copy_fixture_dir("tickers_basic", tmp_path / "datin")
    args = [
        "--datin",
        str(input_dir),
        "--datout",
        str(tmp_path / "datout"),
        "--datlog",
        str(tmp_path / "datlog"),
        "--arch",
        str(tmp_path / "arch"),
    ]

    exit_code = main(args)
    output = capsys.readouterr().out

    assert exit_code == 0 and "status=archived_fully" in output
    assert len(list((tmp_path / "datlog").glob("merge_process_*.log"))) == 1
    assert list(input_dir.iterdir()) == []


def test_cli_requires_all_directories(tmp_path: Path, monkeypatch, capsys) -> None:
    """Missing directory flags should fail before any file is touched."""
    _clear_env(monkeypatch)
    input_dir = copy_fixture_dir("tickers_basic", tmp_path / "datin")

    exit_code = main(["--datin", str(input_dir), "--datout", str(tmp_path / "datout")])
    output = capsys.readouterr().out

    assert exit_code == 1 and "config_error=" in output
    assert not (tmp_path / "datout").exists()
    assert sorted(path.name for path in input_dir.iterdir()) == ["AAPL.csv", "MSFT.csv"]


def test_cli_reads_directories_from_config_file(tmp_path: Path, monkeypatch, capsys) -> None:
    """Directories may come from a YAML config file."""
    _clear_env(monkeypatch)
    copy_fixture_dir("tickers_basic", tmp_path / "datin")
    config_file = tmp_path / "run.yaml"
    config_file.write_text(
        "version: 1\n"
        "input_dir: datin\n"
        "output_dir: datout\n"
        "log_dir: datlog\n"
        "archive_dir: arch\n",
        encoding="utf-8",
    )

    exit_code = main(["--config", str(config_file)])

    assert exit_code == 0 and "files_processed=2" in capsys.readouterr().out


def test_cli_flags_override_environment(tmp_path: Path, monkeypatch, capsys) -> None:
    """Flags should win over environment values."""
    _clear_env(monkeypatch)
    input_dir = copy_fixture_dir("tickers_basic", tmp_path / "datin")
    monkeypatch.setenv("TICKMERGE_INPUT_DIR", str(tmp_path / "missing"))
    monkeypatch.setenv("TICKMERGE_OUTPUT_DIR", str(tmp_path / "datout"))
    monkeypatch.setenv("TICKMERGE_LOG_DIR", str(tmp_path / "datlog"))
    monkeypatch.setenv("TICKMERGE_ARCHIVE_DIR", str(tmp_path / "arch"))

    exit_code = main(["--datin", str(input_dir)])

    assert exit_code == 0 and "status=archived_fully" in capsys.readouterr().out


def test_cli_returns_merge_failure_code(tmp_path: Path, monkeypatch, capsys) -> None:
    """A fatal merge error exits non-zero and creates no archive."""
    _clear_env(monkeypatch)
    args = [
        "--datin",
        str(tmp_path / "missing"),
        "--datout",
        str(tmp_path / "datout"),
        "--datlog",
        str(tmp_path / "datlog"),
        "--arch",
        str(tmp_path / "arch"),
    ]

    exit_code = main(args)
    output = capsys.readouterr().out

    assert exit_code == 2 and "status=aborted" in output
    assert not (tmp_path / "arch").exists()
