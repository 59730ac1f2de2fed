"""YAML run-config parsing for TickMerge.

This module loads and validates the optional YAML file that supplies
directory roles, so scheduled runs can keep paths out of the command line.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, cast

import yaml

from core.config import TickMergeConfig
from core.constants import RUN_CONFIG_VERSION
from core.errors import TickMergeConfigError

_PATH_KEYS = ("input_dir", "output_dir", "log_dir", "archive_dir")
_ALLOWED_KEYS = frozenset(("version", "provenance_field", *_PATH_KEYS))


def load_run_config(config_path: str, base: TickMergeConfig | None = None) -> TickMergeConfig:
    """Load a YAML run config and layer it over a base config.

    Relative directory paths are resolved against the config file's directory.

    Args:
        config_path: File path to the YAML config.
        base: Config the file values override; environment config when omitted.

    Returns:
        Merged configuration.

    Raises:
        TickMergeConfigError: If the file is missing, unparsable, or invalid.
    """
    config_file = Path(config_path).expanduser().resolve()
    root_mapping = _expect_mapping(_load_yaml_payload(config_file), "run config root")
    _validate_root_keys(root_mapping)
    _parse_version(root_mapping)
    overrides: dict[str, object] = {}
    for key in _PATH_KEYS:
        raw_path = _optional_string(root_mapping, key)
        if raw_path is not None:
            overrides[key] = _resolve_relative(config_file.parent, raw_path)
    overrides["provenance_field"] = _optional_string(root_mapping, "provenance_field")
    return (base or TickMergeConfig.from_env()).with_overrides(**overrides)


def _load_yaml_payload(config_file: Path) -> object:
    if not config_file.exists():
        raise TickMergeConfigError(
            f"Run config file does not exist at {config_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(config_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise TickMergeConfigError(
            f"Failed to read run config at {config_file}: {error}. Check file permissions."
        ) from error
    except yaml.YAMLError as error:
        raise TickMergeConfigError(
            f"Failed to parse YAML run config at {config_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise TickMergeConfigError(f"Run config at {config_file} is empty. Define 'version'.")
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise TickMergeConfigError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise TickMergeConfigError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _validate_root_keys(root_mapping: Mapping[str, object]) -> None:
    unknown_keys = sorted(set(root_mapping) - _ALLOWED_KEYS)
    if unknown_keys:
        raise TickMergeConfigError(
            f"Unsupported run config keys: {', '.join(unknown_keys)}. "
            f"Allowed keys: {', '.join(sorted(_ALLOWED_KEYS))}."
        )


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise TickMergeConfigError("Run config field 'version' must be an integer. Set version: 1.")
    if raw_version != RUN_CONFIG_VERSION:
        raise TickMergeConfigError(
            f"Unsupported run config version {raw_version}. Use version: {RUN_CONFIG_VERSION}."
        )
    return raw_version


def _optional_string(mapping: Mapping[str, object], key: str) -> str | None:
    value = mapping.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise TickMergeConfigError(f"Run config field '{key}' must be a non-empty string.")
    return value


def _resolve_relative(config_dir: Path, raw_path: str) -> Path:
    candidate = Path(raw_path).expanduser()
    if candidate.is_absolute():
        return candidate
    return config_dir / candidate
