"""
Directory scanning for translatable call-sites.

Walks a source tree, feeds every Python file to an extraction session and
keeps going past files that cannot be parsed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import override

from ..extraction.session import ExtractionSession
from ..utils.core.exceptions import SourceParseError
from .python_ast import extract_file

logger = logging.getLogger(__name__)

# File patterns to include in extraction
PYTHON_FILE_PATTERNS = ["*.py"]

# Directories to exclude from extraction
EXCLUDED_DIRS = {
    "__pycache__",
    ".git",
    ".hg",
    ".mypy_cache",
    ".pytest_cache",
    ".tox",
    "htmlcov",
    "node_modules",
    "venv",
    "env",
    ".venv",
    ".env",
}


class ScanResult:
    """Result of a directory scan."""

    def __init__(self) -> None:
        self.processed_files: list[Path] = []
        self.failed_files: list[tuple[Path, SourceParseError]] = []
        self.call_sites: int = 0

    @property
    def file_count(self) -> int:
        """Number of files that were extracted."""
        return len(self.processed_files)

    @property
    def failure_count(self) -> int:
        """Number of files skipped because of errors."""
        return len(self.failed_files)

    @override
    def __str__(self) -> str:
        return (
            f"Scan Results: "
            f"{self.file_count} file(s) scanned, "
            f"{self.failure_count} skipped, "
            f"{self.call_sites} translation call(s) found"
        )


def find_source_files(
    directory: Path, exclude_dirs: Iterable[str] | None = None
) -> list[Path]:
    """
    Find Python files below ``directory``.

    Args:
        directory: Root directory to scan
        exclude_dirs: Directory names to skip (defaults to EXCLUDED_DIRS)

    Returns:
        Sorted list of file paths
    """
    excluded = set(EXCLUDED_DIRS if exclude_dirs is None else exclude_dirs)
    files: list[Path] = []

    for pattern in PYTHON_FILE_PATTERNS:
        for filepath in directory.rglob(pattern):
            relative_parts = filepath.relative_to(directory).parts
            if any(part in excluded for part in relative_parts[:-1]):
                continue
            if filepath.is_file():
                files.append(filepath)

    return sorted(files)


def scan_directory(
    session: ExtractionSession,
    directory: Path,
    exclude_dirs: Iterable[str] | None = None,
) -> ScanResult:
    """
    Extract translation calls from every Python file below ``directory``.

    Files that cannot be read or parsed are logged and skipped; configuration
    errors raised by the session propagate.

    Args:
        session: Session receiving the extracted nodes
        directory: Root directory to scan
        exclude_dirs: Directory names to skip (defaults to EXCLUDED_DIRS)

    Returns:
        ScanResult with details of the operation
    """
    result = ScanResult()

    for filepath in find_source_files(directory, exclude_dirs):
        try:
            result.call_sites += extract_file(session, filepath)
            result.processed_files.append(filepath)
        except SourceParseError as e:
            logger.warning(f"Skipping {filepath} due to error: {e}")
            result.failed_files.append((filepath, e))

    logger.info(str(result))
    return result
