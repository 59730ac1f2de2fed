"""Public SDK surface for TickMerge.

This module provides a stable import path for scripted runs.
It re-exports the pipeline entry points and typed result models.
"""

from __future__ import annotations

from core.config import TickMergeConfig
from core.errors import TickMergeError
from core.logging_config import close_logging, configure_logging
from core.run_config import load_run_config
from core.types import (
    ArchiveResult,
    MergeResult,
    PipelineOptions,
    PipelineRunResult,
    SourceFile,
)
from ingest.directory_walker import walk_source_files
from ingest.pipeline import run_pipeline
from ingest.record_merger import RecordMerger, merge_directory
from store.archive_manager import ArchiveManager, archive_run

__all__ = [
    "ArchiveManager",
    "ArchiveResult",
    "MergeResult",
    "PipelineOptions",
    "PipelineRunResult",
    "RecordMerger",
    "SourceFile",
    "TickMergeConfig",
    "TickMergeError",
    "archive_run",
    "close_logging",
    "configure_logging",
    "load_run_config",
    "merge_directory",
    "run_pipeline",
    "walk_source_files",
]
