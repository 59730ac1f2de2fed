"""Unit tests for YAML run-config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import TickMergeConfig
from core.errors import TickMergeConfigError
from core.run_config import load_run_config
from tests.fixture_paths import fixture_path


def test_load_run_config_resolves_relative_paths() -> None:
    """Relative directories should resolve against the config file location."""
    config_file = fixture_path("configs/run_config.yaml")

    config = load_run_config(str(config_file), base=TickMergeConfig())

    options = config.require_pipeline_options()
    assert options.input_dir == config_file.parent / "datin"
    assert options.archive_dir == config_file.parent / "arch"


def test_load_run_config_overrides_base_values(tmp_path: Path) -> None:
    """File values should win over the base config; absent keys keep base values."""
    config_file = tmp_path / "partial.yaml"
    config_file.write_text(
        f"version: 1\ninput_dir: {tmp_path / 'in'}\nprovenance_field: ticker\n",
        encoding="utf-8",
    )
    base = TickMergeConfig(input_dir=Path("/old/in"), output_dir=Path("/old/out"))

    config = load_run_config(str(config_file), base=base)

    assert config.input_dir == tmp_path / "in"
    assert config.output_dir == Path("/old/out")
    assert config.provenance_field == "ticker"


def test_load_run_config_rejects_unknown_keys(tmp_path: Path) -> None:
    """Typos in key names should not be silently ignored."""
    config_file = tmp_path / "typo.yaml"
    config_file.write_text("version: 1\ninput_directory: in\n", encoding="utf-8")

    with pytest.raises(TickMergeConfigError, match="input_directory"):
        load_run_config(str(config_file), base=TickMergeConfig())


def test_load_run_config_rejects_unsupported_version(tmp_path: Path) -> None:
    """Only version 1 configs are accepted."""
    config_file = tmp_path / "v2.yaml"
    config_file.write_text("version: 2\n", encoding="utf-8")

    with pytest.raises(TickMergeConfigError):
        load_run_config(str(config_file), base=TickMergeConfig())


def test_load_run_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    """Malformed YAML should surface as a config error."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("version: [1\n", encoding="utf-8")

    with pytest.raises(TickMergeConfigError):
        load_run_config(str(config_file), base=TickMergeConfig())


def test_load_run_config_rejects_missing_file(tmp_path: Path) -> None:
    """A missing config file is a config error."""
    with pytest.raises(TickMergeConfigError):
        load_run_config(str(tmp_path / "absent.yaml"), base=TickMergeConfig())
