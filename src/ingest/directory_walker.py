"""Source file discovery under the input root."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from core.constants import SOURCE_FILE_EXTENSION
from core.errors import TickMergeWalkError
from core.types import SourceFile


def walk_source_files(input_root: Path, exclude: Path | None = None) -> Iterator[SourceFile]:
    """Lazily yield every source file anywhere under ``input_root``.

    Directories are visited top-down with names sorted inside each directory.
    The generator is single-pass; call again to restart the walk.

    Args:
        input_root: Directory to traverse.
        exclude: Optional file path that is never yielded.

    Yields:
        Source files whose names end in the source extension, any case.

    Raises:
        TickMergeWalkError: If the root or any subdirectory cannot be listed.
    """
    excluded = _resolve(exclude) if exclude is not None else None
    for dir_path, dir_names, file_names in os.walk(input_root, onerror=_raise_walk_error):
        dir_names.sort()
        for file_name in sorted(file_names):
            if not _is_source_name(file_name):
                continue
            file_path = Path(dir_path) / file_name
            if excluded is not None and _resolve(file_path) == excluded:
                continue
            yield SourceFile(path=file_path, file_name=file_name)


def _resolve(path: Path) -> Path:
    """Resolve a path for exclusion checks.

    Raises:
        TickMergeWalkError: If the path cannot be resolved, e.g. a symlink loop.
    """
    try:
        return path.resolve()
    except (OSError, RuntimeError) as error:
        raise TickMergeWalkError(
            f"Failed to resolve path {path} while traversing input: {error}. "
            "Check for broken or looping symlinks under the input directory."
        ) from error


def _raise_walk_error(error: OSError) -> None:
    raise TickMergeWalkError(
        f"Failed to traverse input directory at {error.filename}: {error.strerror or error}. "
        "Check that the input directory exists and is readable."
    ) from error


def _is_source_name(file_name: str) -> bool:
    """Return whether a file name carries the source extension."""
    return file_name.lower().endswith(SOURCE_FILE_EXTENSION)