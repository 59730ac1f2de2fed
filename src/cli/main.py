"""TickMerge CLI entry point.

This module resolves directory roles from flags, a YAML config file, and
the environment, then runs the merge-then-archive pipeline once.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from core.config import TickMergeConfig
from core.constants import (
    DEFAULT_PROVENANCE_FIELD,
    EXIT_ARCHIVE_FAILED,
    EXIT_CONFIG_ERROR,
    EXIT_MERGE_FAILED,
    EXIT_OK,
)
from core.errors import TickMergeConfigError, TickMergeSetupError
from core.logging_config import close_logging, configure_logging
from core.run_config import load_run_config
from core.types import PipelineOptions, PipelineRunResult
from ingest.pipeline import run_pipeline


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="tickmerge",
        description="Merge per-ticker CSV files into one extract and archive the inputs",
    )
    parser.add_argument("--datin", help="Input directory for ticker CSV files (required)")
    parser.add_argument("--datout", help="Output directory for the merged file (required)")
    parser.add_argument("--datlog", help="Directory for log files (required)")
    parser.add_argument("--arch", help="Directory to archive source and merged files (required)")
    parser.add_argument("--config", help="Optional YAML file supplying the directories")
    parser.add_argument(
        "--provenance-field",
        help=f"Header of the appended ticker column (default: {DEFAULT_PROVENANCE_FIELD})",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the TickMerge CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        options = _resolve_options(args)
        log_path = configure_logging(options.log_dir)
    except (TickMergeConfigError, TickMergeSetupError) as error:
        print(f"config_error={error}")
        parser.print_usage()
        return EXIT_CONFIG_ERROR
    try:
        result = run_pipeline(options)
    finally:
        close_logging()
    _print_summary(result, log_path)
    return _exit_code(result)


def _resolve_options(args: argparse.Namespace) -> PipelineOptions:
    """Layer flags over the config file over the environment.

    Raises:
        TickMergeConfigError: If any directory role is missing or invalid.
    """
    config = TickMergeConfig.from_env()
    if args.config:
        config = load_run_config(args.config, base=config)
    config = config.with_overrides(
        input_dir=args.datin,
        output_dir=args.datout,
        log_dir=args.datlog,
        archive_dir=args.arch,
        provenance_field=args.provenance_field,
    )
    return config.require_pipeline_options()


def _print_summary(result: PipelineRunResult, log_path: Path) -> None:
    print(f"status={result.status}")
    if result.merge is not None:
        print(f"files_processed={result.merge.files_processed}")
        print(f"rows_written={result.merge.rows_written}")
    if result.archive is not None:
        print(f"archive_dir={result.archive.archive_dir}")
        print(f"output_path={result.archive.merged_file_path}")
        print(f"unarchived_files={len(result.archive.failed_entries)}")
    if result.error is not None:
        print(f"error={result.error}")
    print(f"log_path={log_path}")


def _exit_code(result: PipelineRunResult) -> int:
    if result.status == "aborted":
        return EXIT_MERGE_FAILED
    if result.status == "archive_failed":
        return EXIT_ARCHIVE_FAILED
    return EXIT_OK
