"""Per-file parsing of delimited source files.

This module turns one source file into ordered records. Every open
or parse failure is raised as ``TickMergeSourceError`` so the
merger can skip the file without aborting the run.
"""

from __future__ import annotations

import csv

from core.constants import MAX_CSV_FIELD_SIZE, SOURCE_FILE_ENCODING, TEXT_ENCODING_ERRORS
from core.errors import TickMergeSourceError
from core.types import Record, SourceFile


def read_source_records(source: SourceFile) -> list[Record]:
    """Fully parse a source file into records.

    The first record is the header. Blank lines are ignored. Every record
    must have the header's field count. Bytes that are not valid UTF-8 are
    kept as surrogate escapes so the writer can emit them unchanged.

    Args:
        source: File to parse.

    Returns:
        Ordered records, header first. Empty for an empty file.

    Raises:
        TickMergeSourceError: If the file cannot be opened or parsed.
    """
    csv.field_size_limit(MAX_CSV_FIELD_SIZE)
    try:
        with source.path.open(
            "r", encoding=SOURCE_FILE_ENCODING, errors=TEXT_ENCODING_ERRORS, newline=""
        ) as handle:
            records = [tuple(row) for row in csv.reader(handle, strict=True) if row]
    except (OSError, csv.Error) as error:
        raise TickMergeSourceError(
            f"Failed to read source file {source.path}: {error}. "
            "Fix or remove the file and rerun."
        ) from error
    _validate_field_counts(source, records)
    return records


def _validate_field_counts(source: SourceFile, records: list[Record]) -> None:
    """Reject files whose rows disagree with the header width.

    Raises:
        TickMergeSourceError: On the first record with a different field count.
    """
    if not records:
        return
    expected_count = len(records[0])
    for record_number, record in enumerate(records[1:], 2):
        if len(record) != expected_count:
            raise TickMergeSourceError(
                f"Failed to parse source file {source.path}: record {record_number} has "
                f"{len(record)} fields, expected {expected_count}. "
                "Fix the row and rerun."
            )
