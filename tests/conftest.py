"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest


def pytest_sessionstart() -> None:
    """Add project root and src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    for import_root in (project_root / "src", project_root):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))


@pytest.fixture(autouse=True)
def _release_log_sink() -> Iterator[None]:
    """Drop any run log handlers a test opened."""
    yield
    from core.logging_config import close_logging

    close_logging()
