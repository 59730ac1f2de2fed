"""Shared typed models.

This module defines immutable data models passed between the walker,
merger, archive manager, and pipeline so stage boundaries stay explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from core.constants import DEFAULT_PROVENANCE_FIELD, SOURCE_FILE_EXTENSION

Record = tuple[str, ...]
RunStatus = Literal["aborted", "archive_failed", "archived_fully", "archived_partially"]


@dataclass(frozen=True)
class SourceFile:
    """Candidate per-entity source file found under the input root.

    Attributes:
        path: Full path to the file.
        file_name: Base file name including extension.
    """

    path: Path
    file_name: str

    @property
    def entity_id(self) -> str:
        """File name with the source extension removed, e.g. ``AAPL``."""
        return self.file_name[: -len(SOURCE_FILE_EXTENSION)]


@dataclass(frozen=True)
class SkippedSource:
    """Source file the merger left out of the merged dataset.

    Attributes:
        path: Source file path.
        reason: ``unreadable`` or ``empty``.
        detail: Human-readable cause.
    """

    path: Path
    reason: Literal["unreadable", "empty"]
    detail: str


@dataclass(frozen=True)
class MergeResult:
    """Summary of one successful merge stage.

    Attributes:
        output_path: Location of the merged output file.
        files_processed: Source files that contributed data rows.
        rows_written: Data rows written, header excluded.
        header_written: Whether any header row was written.
        skipped_sources: Sources left out, in walk order.
    """

    output_path: Path
    files_processed: int
    rows_written: int
    header_written: bool
    skipped_sources: tuple[SkippedSource, ...] = ()


@dataclass(frozen=True)
class FailedArchiveEntry:
    """Source entry that could not be moved into the archive batch."""

    path: Path
    detail: str


@dataclass(frozen=True)
class ArchiveResult:
    """Summary of one archive batch.

    Attributes:
        archive_dir: Newly created timestamped batch directory.
        merged_file_path: Merged output location inside the batch.
        moved_entries: Input-root entries relocated into the batch.
        failed_entries: Entries that stayed in the input root after a move error.
        skipped_directories: Input-root directories left in place.
    """

    archive_dir: Path
    merged_file_path: Path
    moved_entries: tuple[Path, ...] = ()
    failed_entries: tuple[FailedArchiveEntry, ...] = ()
    skipped_directories: tuple[Path, ...] = ()

    @property
    def is_partial(self) -> bool:
        """Return whether any source entry failed to move."""
        return bool(self.failed_entries)


@dataclass(frozen=True)
class PipelineOptions:
    """Validated directory roles for one pipeline run.

    Attributes:
        input_dir: Directory holding per-entity source files.
        output_dir: Directory receiving the merged output file.
        log_dir: Directory receiving the run log file.
        archive_dir: Root under which archive batches are created.
        provenance_field: Name of the appended entity column.
    """

    input_dir: Path
    output_dir: Path
    log_dir: Path
    archive_dir: Path
    provenance_field: str = DEFAULT_PROVENANCE_FIELD


@dataclass(frozen=True)
class PipelineRunResult:
    """Outcome of one merge-then-archive run.

    Attributes:
        status: Terminal run state.
        merge: Merge summary when merging succeeded.
        archive: Archive summary when archiving succeeded.
        error: Fatal error that stopped the run, if any.
    """

    status: RunStatus
    merge: MergeResult | None = None
    archive: ArchiveResult | None = None
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether the run reached an archived state."""
        return self.status in ("archived_fully", "archived_partially")
