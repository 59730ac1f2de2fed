"""Artifact naming for merge outputs, archive batches, and log files."""

from __future__ import annotations

from datetime import datetime

from core.constants import (
    ARCHIVE_DIR_PREFIX,
    LOG_FILE_EXTENSION,
    LOG_FILE_PREFIX,
    OUTPUT_DATE_FORMAT,
    OUTPUT_FILE_PREFIX,
    RUN_TIMESTAMP_FORMAT,
    SOURCE_FILE_EXTENSION,
)


def build_output_file_name(moment: datetime) -> str:
    """Return the merged output name for one calendar day, e.g. ``extract_20200101.csv``."""
    return f"{OUTPUT_FILE_PREFIX}{moment.strftime(OUTPUT_DATE_FORMAT)}{SOURCE_FILE_EXTENSION}"


def build_archive_dir_name(moment: datetime) -> str:
    """Return the archive batch directory name with second precision."""
    return f"{ARCHIVE_DIR_PREFIX}{moment.strftime(RUN_TIMESTAMP_FORMAT)}"


def build_log_file_name(moment: datetime) -> str:
    """Return the per-run log file name."""
    return f"{LOG_FILE_PREFIX}{moment.strftime(RUN_TIMESTAMP_FORMAT)}{LOG_FILE_EXTENSION}"
