"""Streaming merge of per-entity source files into one output file.

Each source file's data rows are tagged with the file's entity id and
written immediately, so the merged dataset is never held in memory.
A bad source file is skipped; a failed write to the shared output aborts.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, TextIO

from core.constants import (
    DEFAULT_PROVENANCE_FIELD,
    MIN_SOURCE_RECORD_COUNT,
    OUTPUT_FILE_ENCODING,
    OUTPUT_LINE_TERMINATOR,
    TEXT_ENCODING_ERRORS,
)
from core.errors import TickMergeSetupError, TickMergeSourceError, TickMergeWriteError
from core.logging_config import get_logger
from core.naming import build_output_file_name
from core.types import MergeResult, SkippedSource, SourceFile
from ingest.directory_walker import walk_source_files
from ingest.source_reader import read_source_records

_LOGGER = get_logger(__name__)


@dataclass
class _MergeProgress:
    """Mutable counters for one merge run."""

    header_written: bool = False
    files_processed: int = 0
    rows_written: int = 0
    skipped_sources: list[SkippedSource] = field(default_factory=list)


class RecordMerger:
    """Merge every source file under an input root into one dated output file."""

    def __init__(
        self,
        output_root: Path,
        provenance_field: str = DEFAULT_PROVENANCE_FIELD,
        clock: Callable[[], datetime] = datetime.now,
        logger: Any | None = None,
    ) -> None:
        self._output_root = output_root
        self._provenance_field = provenance_field
        self._clock = clock
        self._logger = logger or _LOGGER

    def merge(self, input_root: Path) -> MergeResult:
        """Walk ``input_root`` and stream all data rows into the output file.

        Args:
            input_root: Directory tree holding source files.

        Returns:
            Summary of the written output.

        Raises:
            TickMergeSetupError: If the output directory or file cannot be created.
            TickMergeWalkError: If the input tree cannot be traversed.
            TickMergeWriteError: If writing, flushing, or closing the output fails.
        """
        output_path = self._output_root / build_output_file_name(self._clock())
        handle = self._open_output(output_path)
        progress = _MergeProgress()
        self._logger.info("merge_started", input_root=str(input_root), output_path=str(output_path))
        try:
            with handle:
                writer = csv.writer(handle, lineterminator=OUTPUT_LINE_TERMINATOR)
                for source in walk_source_files(input_root, exclude=output_path):
                    self._merge_source(source, writer, progress, output_path)
        except OSError as error:
            # Row writes raise their own error; only flush and close reach here.
            raise _write_error(output_path, error) from error
        self._logger.info(
            "merge_completed",
            output_path=str(output_path),
            files_processed=progress.files_processed,
            rows_written=progress.rows_written,
            files_skipped=len(progress.skipped_sources),
        )
        return MergeResult(
            output_path=output_path,
            files_processed=progress.files_processed,
            rows_written=progress.rows_written,
            header_written=progress.header_written,
            skipped_sources=tuple(progress.skipped_sources),
        )

    def _open_output(self, output_path: Path) -> TextIO:
        try:
            self._output_root.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise TickMergeSetupError(
                f"Failed to create output directory {self._output_root}: {error}. "
                "Check the --datout path."
            ) from error
        if output_path.exists():
            # Same-day rerun before archiving replaces the earlier result.
            self._logger.warning("merge_output_overwritten", output_path=str(output_path))
        try:
            return output_path.open(
                "w", encoding=OUTPUT_FILE_ENCODING, errors=TEXT_ENCODING_ERRORS, newline=""
            )
        except OSError as error:
            raise TickMergeSetupError(
                f"Failed to create merged output file {output_path}: {error}. "
                "Check that the output directory is writable."
            ) from error

    def _merge_source(
        self,
        source: SourceFile,
        writer: Any,
        progress: _MergeProgress,
        output_path: Path,
    ) -> None:
        entity_id = source.entity_id
        self._logger.info("source_processing", file_name=source.file_name, entity_id=entity_id)
        try:
            records = read_source_records(source)
        except TickMergeSourceError as error:
            self._logger.warning(
                "source_skipped_unreadable", path=str(source.path), error=str(error)
            )
            progress.skipped_sources.append(
                SkippedSource(path=source.path, reason="unreadable", detail=str(error))
            )
            return
        if len(records) < MIN_SOURCE_RECORD_COUNT:
            self._logger.info(
                "source_skipped_empty", path=str(source.path), record_count=len(records)
            )
            progress.skipped_sources.append(
                SkippedSource(
                    path=source.path,
                    reason="empty",
                    detail=f"{len(records)} record(s); a header and one data row are required",
                )
            )
            return
        if not progress.header_written:
            _write_row(writer, (*records[0], self._provenance_field), output_path)
            progress.header_written = True
        for record in records[1:]:
            _write_row(writer, (*record, entity_id), output_path)
            progress.rows_written += 1
        progress.files_processed += 1


def merge_directory(
    input_root: Path,
    output_root: Path,
    provenance_field: str = DEFAULT_PROVENANCE_FIELD,
    clock: Callable[[], datetime] = datetime.now,
    logger: Any | None = None,
) -> MergeResult:
    """Merge all source files under ``input_root`` into ``output_root``.

    Args:
        input_root: Directory tree holding source files.
        output_root: Directory receiving ``extract_<YYYYMMDD>.csv``.
        provenance_field: Header name of the appended entity column.
        clock: Source of the output file date.
        logger: Optional structured logger; module logger when omitted.

    Returns:
        Summary of the written output.

    Raises:
        TickMergeSetupError: If the output location cannot be prepared.
        TickMergeWalkError: If the input tree cannot be traversed.
        TickMergeWriteError: If the output stream fails.
    """
    merger = RecordMerger(
        output_root, provenance_field=provenance_field, clock=clock, logger=logger
    )
    return merger.merge(input_root)


def _write_row(writer: Any, row: tuple[str, ...], output_path: Path) -> None:
    """Write one output row.

    Raises:
        TickMergeWriteError: If the output stream rejects the row.
    """
    try:
        writer.writerow(row)
    except OSError as error:
        raise _write_error(output_path, error) from error


def _write_error(output_path: Path, error: OSError) -> TickMergeWriteError:
    return TickMergeWriteError(
        f"Failed to write merged output {output_path}: {error}. "
        "The merged file is incomplete; free space or fix permissions and rerun."
    )
