"""Core constants used across TickMerge modules.

This module centralizes naming patterns and format constants.
Keeping values here avoids magic literals in pipeline logic.
"""

from __future__ import annotations

SOURCE_FILE_EXTENSION = ".csv"
DEFAULT_PROVENANCE_FIELD = "tick_nm"
MIN_SOURCE_RECORD_COUNT = 2
SOURCE_FILE_ENCODING = "utf-8"
OUTPUT_FILE_ENCODING = "utf-8"
# Undecodable bytes round-trip from source to output unchanged.
TEXT_ENCODING_ERRORS = "surrogateescape"
# Largest field the csv module accepts on every platform (C long on Windows).
MAX_CSV_FIELD_SIZE = 2**31 - 1
OUTPUT_LINE_TERMINATOR = "\n"
OUTPUT_FILE_PREFIX = "extract_"
OUTPUT_DATE_FORMAT = "%Y%m%d"
ARCHIVE_DIR_PREFIX = "archive_"
LOG_FILE_PREFIX = "merge_process_"
LOG_FILE_EXTENSION = ".log"
RUN_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
LOGGER_NAME = "tickmerge"
RUN_CONFIG_VERSION = 1
ENV_INPUT_DIR = "TICKMERGE_INPUT_DIR"
ENV_OUTPUT_DIR = "TICKMERGE_OUTPUT_DIR"
ENV_LOG_DIR = "TICKMERGE_LOG_DIR"
ENV_ARCHIVE_DIR = "TICKMERGE_ARCHIVE_DIR"
ENV_PROVENANCE_FIELD = "TICKMERGE_PROVENANCE_FIELD"
EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_MERGE_FAILED = 2
EXIT_ARCHIVE_FAILED = 3
