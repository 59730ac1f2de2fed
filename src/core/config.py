"""Runtime configuration model for TickMerge.

This module owns environment variable parsing and required-role validation.
Other modules consume typed options instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import os
from pathlib import Path
from typing import cast

from core.constants import (
    DEFAULT_PROVENANCE_FIELD,
    ENV_ARCHIVE_DIR,
    ENV_INPUT_DIR,
    ENV_LOG_DIR,
    ENV_OUTPUT_DIR,
    ENV_PROVENANCE_FIELD,
)
from core.errors import TickMergeConfigError
from core.types import PipelineOptions

_DIRECTORY_FLAGS = {
    "input_dir": "--datin",
    "output_dir": "--datout",
    "log_dir": "--datlog",
    "archive_dir": "--arch",
}


@dataclass(frozen=True)
class TickMergeConfig:
    """Partially or fully specified runtime configuration.

    Attributes:
        input_dir: Directory holding per-entity source files.
        output_dir: Directory receiving the merged output file.
        log_dir: Directory receiving run log files.
        archive_dir: Root under which archive batches are created.
        provenance_field: Name of the appended entity column.
    """

    input_dir: Path | None = None
    output_dir: Path | None = None
    log_dir: Path | None = None
    archive_dir: Path | None = None
    provenance_field: str = DEFAULT_PROVENANCE_FIELD

    @classmethod
    def from_env(cls) -> "TickMergeConfig":
        """Build config from process environment variables.

        Returns:
            Config with whichever roles the environment defines.

        Raises:
            TickMergeConfigError: If the provenance field is blank.
        """
        provenance_field = os.getenv(ENV_PROVENANCE_FIELD, DEFAULT_PROVENANCE_FIELD)
        return cls(
            input_dir=_optional_path(os.getenv(ENV_INPUT_DIR)),
            output_dir=_optional_path(os.getenv(ENV_OUTPUT_DIR)),
            log_dir=_optional_path(os.getenv(ENV_LOG_DIR)),
            archive_dir=_optional_path(os.getenv(ENV_ARCHIVE_DIR)),
            provenance_field=_parse_provenance_field(provenance_field, ENV_PROVENANCE_FIELD),
        )

    def with_overrides(self, **overrides: object) -> "TickMergeConfig":
        """Return a copy with every non-None override applied."""
        known_names = {config_field.name for config_field in fields(self)}
        applied: dict[str, object] = {}
        for name, value in overrides.items():
            if name not in known_names:
                raise TickMergeConfigError(f"Unknown configuration field '{name}'.")
            if value is None:
                continue
            if name == "provenance_field":
                applied[name] = _parse_provenance_field(str(value), name)
            else:
                applied[name] = Path(str(value)).expanduser()
        return replace(self, **applied)

    def require_pipeline_options(self) -> PipelineOptions:
        """Validate that all directory roles are present.

        Returns:
            Pipeline options with every role resolved.

        Raises:
            TickMergeConfigError: Naming every missing role and its flag.
        """
        missing = [
            f"{name} ({flag})"
            for name, flag in _DIRECTORY_FLAGS.items()
            if getattr(self, name) is None
        ]
        if missing:
            raise TickMergeConfigError(
                "Missing required directories: "
                f"{', '.join(missing)}. "
                "Pass all of --datin, --datout, --datlog, --arch or set them in a config file."
            )
        return PipelineOptions(
            input_dir=cast(Path, self.input_dir),
            output_dir=cast(Path, self.output_dir),
            log_dir=cast(Path, self.log_dir),
            archive_dir=cast(Path, self.archive_dir),
            provenance_field=self.provenance_field,
        )


def _optional_path(raw_value: str | None) -> Path | None:
    if not raw_value:
        return None
    return Path(raw_value).expanduser()


def _parse_provenance_field(raw_value: str, source: str) -> str:
    """Validate the provenance column name.

    Raises:
        TickMergeConfigError: If the value is blank.
    """
    value = raw_value.strip()
    if not value:
        raise TickMergeConfigError(
            f"Invalid provenance field from {source}: expected a non-empty column name. "
            f"Unset it to use the default '{DEFAULT_PROVENANCE_FIELD}'."
        )
    return value
