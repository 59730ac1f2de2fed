"""Archive batches for merged outputs and their source files.

This module relocates one run's merged file and the input root's
top-level files into a fresh timestamped directory. The merged file
moves first; a source file that fails to move stays behind and is
reported, so the next run can still pick it up.
"""

from __future__ import annotations

from datetime import datetime
import os
from pathlib import Path
import shutil
from typing import Any, Callable

from core.errors import TickMergeArchiveError
from core.logging_config import get_logger
from core.naming import build_archive_dir_name
from core.types import ArchiveResult, FailedArchiveEntry

_LOGGER = get_logger(__name__)


class ArchiveManager:
    """Commit merge results into timestamped archive batches."""

    def __init__(
        self,
        archive_root: Path,
        clock: Callable[[], datetime] = datetime.now,
        logger: Any | None = None,
    ) -> None:
        self._archive_root = archive_root
        self._clock = clock
        self._logger = logger or _LOGGER

    def archive(self, merged_file_path: Path, input_root: Path) -> ArchiveResult:
        """Move the merged file and all top-level input files into a new batch.

        Args:
            merged_file_path: Output of a successful merge.
            input_root: Directory whose top-level files were merged.

        Returns:
            Summary of moved, failed, and skipped entries.

        Raises:
            TickMergeArchiveError: If the batch directory cannot be created, the
                merged file cannot be moved, or the input root cannot be listed.
        """
        archive_dir = self._create_batch_dir()
        archived_merged_path = self._move_merged_file(merged_file_path, archive_dir)
        moved_entries: list[Path] = []
        failed_entries: list[FailedArchiveEntry] = []
        skipped_directories: list[Path] = []
        self._logger.info("source_archive_started", input_root=str(input_root))
        for entry_path, is_directory in _list_top_level_entries(input_root):
            if is_directory:
                self._logger.warning("source_archive_skipped_directory", path=str(entry_path))
                skipped_directories.append(entry_path)
                continue
            target_path = archive_dir / entry_path.name
            try:
                shutil.move(str(entry_path), str(target_path))
            except OSError as error:
                self._logger.warning(
                    "source_archive_failed", path=str(entry_path), error=str(error)
                )
                failed_entries.append(FailedArchiveEntry(path=entry_path, detail=str(error)))
                continue
            moved_entries.append(target_path)
        self._logger.info(
            "archive_completed",
            archive_dir=str(archive_dir),
            moved_count=len(moved_entries),
            failed_count=len(failed_entries),
            skipped_directory_count=len(skipped_directories),
        )
        return ArchiveResult(
            archive_dir=archive_dir,
            merged_file_path=archived_merged_path,
            moved_entries=tuple(moved_entries),
            failed_entries=tuple(failed_entries),
            skipped_directories=tuple(skipped_directories),
        )

    def _create_batch_dir(self) -> Path:
        archive_dir = self._archive_root / build_archive_dir_name(self._clock())
        try:
            self._archive_root.mkdir(parents=True, exist_ok=True)
            archive_dir.mkdir()
        except FileExistsError as error:
            raise TickMergeArchiveError(
                f"Archive directory {archive_dir} already exists. "
                "Archive batches are never reused; wait a second and rerun."
            ) from error
        except OSError as error:
            raise TickMergeArchiveError(
                f"Failed to create archive directory {archive_dir}: {error}. "
                "Check the --arch path."
            ) from error
        self._logger.info("archive_dir_created", archive_dir=str(archive_dir))
        return archive_dir

    def _move_merged_file(self, merged_file_path: Path, archive_dir: Path) -> Path:
        target_path = archive_dir / merged_file_path.name
        self._logger.info("merged_file_archiving", target_path=str(target_path))
        try:
            shutil.move(str(merged_file_path), str(target_path))
        except OSError as error:
            raise TickMergeArchiveError(
                f"Failed to archive merged file {merged_file_path}: {error}. "
                "Source files were left in place."
            ) from error
        return target_path


def archive_run(
    archive_root: Path,
    merged_file_path: Path,
    input_root: Path,
    clock: Callable[[], datetime] = datetime.now,
    logger: Any | None = None,
) -> ArchiveResult:
    """Archive one successful merge.

    Args:
        archive_root: Root under which ``archive_<YYYYMMDD_HHMMSS>`` is created.
        merged_file_path: Output of a successful merge.
        input_root: Directory whose top-level files are relocated.
        clock: Source of the batch timestamp.
        logger: Optional structured logger; module logger when omitted.

    Returns:
        Summary of the archive batch.

    Raises:
        TickMergeArchiveError: If the batch cannot be committed.
    """
    manager = ArchiveManager(archive_root, clock=clock, logger=logger)
    return manager.archive(merged_file_path, input_root)


def _list_top_level_entries(input_root: Path) -> list[tuple[Path, bool]]:
    """List input-root entries without recursion, sorted by name.

    Symlinks count as files, so a link to a directory is moved, not skipped.

    Raises:
        TickMergeArchiveError: If the directory cannot be read.
    """
    try:
        with os.scandir(input_root) as entries:
            listed = sorted(
                (entry.name, entry.is_dir(follow_symlinks=False)) for entry in entries
            )
    except OSError as error:
        raise TickMergeArchiveError(
            f"Failed to list input directory {input_root} for archiving: {error}. "
            "The merged file is archived; move source files manually."
        ) from error
    return [(input_root / name, is_directory) for name, is_directory in listed]
