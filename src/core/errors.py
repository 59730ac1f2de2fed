"""TickMerge exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class TickMergeError(Exception):
    """Base exception for all TickMerge failures."""


class TickMergeConfigError(TickMergeError):
    """Raised for missing or invalid runtime configuration."""


class TickMergeSetupError(TickMergeError):
    """Raised when output, log, or archive locations cannot be prepared."""


class TickMergeWalkError(TickMergeError):
    """Raised when the input directory tree cannot be traversed."""


class TickMergeSourceError(TickMergeError):
    """Raised when one source file cannot be opened or parsed."""


class TickMergeWriteError(TickMergeError):
    """Raised when the merged output stream cannot be written."""


class TickMergeArchiveError(TickMergeError):
    """Raised when an archive batch cannot be committed."""
