"""Merge-then-archive orchestration.

This module runs the merge stage and, only when it succeeds, the archive
stage. Fatal stage errors are captured in an explicit run result so the
caller decides exit behavior.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from core.errors import TickMergeArchiveError, TickMergeError
from core.logging_config import get_logger
from core.types import MergeResult, PipelineOptions, PipelineRunResult, RunStatus
from ingest.record_merger import RecordMerger
from store.archive_manager import ArchiveManager

_LOGGER = get_logger(__name__)


def run_pipeline(
    options: PipelineOptions,
    clock: Callable[[], datetime] = datetime.now,
    logger: Any | None = None,
) -> PipelineRunResult:
    """Merge the input root, then archive the result and the sources.

    Args:
        options: Validated directory roles.
        clock: Source of output, archive, and log timestamps.
        logger: Optional structured logger shared by both stages.

    Returns:
        Run result with status ``aborted`` when merging failed (no archive is
        created and the input root is untouched), ``archive_failed`` when
        archiving failed, otherwise ``archived_fully`` or ``archived_partially``.
    """
    run_logger = logger or _LOGGER
    _log_run_started(run_logger, options)
    merger = RecordMerger(
        options.output_dir,
        provenance_field=options.provenance_field,
        clock=clock,
        logger=run_logger,
    )
    try:
        merge_result = merger.merge(options.input_dir)
    except TickMergeError as error:
        run_logger.error("merge_failed", error=str(error), error_type=type(error).__name__)
        return PipelineRunResult(status="aborted", error=error)
    return _archive_merge(options, merge_result, clock, run_logger)


def _archive_merge(
    options: PipelineOptions,
    merge_result: MergeResult,
    clock: Callable[[], datetime],
    run_logger: Any,
) -> PipelineRunResult:
    """Run the archive stage for a successful merge."""
    manager = ArchiveManager(options.archive_dir, clock=clock, logger=run_logger)
    try:
        archive_result = manager.archive(merge_result.output_path, options.input_dir)
    except TickMergeArchiveError as error:
        run_logger.error("archive_failed", error=str(error))
        return PipelineRunResult(status="archive_failed", merge=merge_result, error=error)
    status: RunStatus = "archived_partially" if archive_result.is_partial else "archived_fully"
    run_logger.info(
        "run_completed",
        status=status,
        files_processed=merge_result.files_processed,
        rows_written=merge_result.rows_written,
        archive_dir=str(archive_result.archive_dir),
    )
    return PipelineRunResult(status=status, merge=merge_result, archive=archive_result)


def _log_run_started(run_logger: Any, options: PipelineOptions) -> None:
    """Log the resolved directory roles for the run."""
    run_logger.info(
        "run_started",
        input_dir=str(options.input_dir),
        output_dir=str(options.output_dir),
        log_dir=str(options.log_dir),
        archive_dir=str(options.archive_dir),
        provenance_field=options.provenance_field,
    )
