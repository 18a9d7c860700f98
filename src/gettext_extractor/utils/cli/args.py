"""
Command-line argument parsing for gettext-extractor.

This module parses the arguments of the ``gettext-extractor`` command and
validates the paths they name.
"""

import argparse
from pathlib import Path
from typing import NamedTuple

from ..core.version import get_version


class PathValidationError(Exception):
    """Raised when a path validation fails."""

    pass


class ParsedArgs(NamedTuple):
    """Type-safe container for command-line arguments."""

    source_dir: Path
    output: Path | None
    config_file: Path | None
    base_directory: str | None
    exclude: list[str]
    verbose: bool
    dry_run: bool
    ci_mode: bool
    check: bool
    write_through: bool


def validate_source_dir(source_dir_str: str) -> Path:
    """
    Validate the source directory.

    Args:
        source_dir_str: String path to the directory to scan

    Returns:
        Path to the source directory, as given

    Raises:
        PathValidationError: If the directory is missing or not a directory
    """
    source_dir = Path(source_dir_str).expanduser()

    if not source_dir.exists():
        raise PathValidationError(f"Source directory does not exist: {source_dir}")

    if not source_dir.is_dir():
        raise PathValidationError(f"Source path is not a directory: {source_dir}")

    return source_dir


def validate_config_file_path(config_file_str: str) -> Path:
    """
    Validate configuration file path.

    Args:
        config_file_str: String path to configuration file

    Returns:
        Resolved Path object for the configuration file

    Raises:
        PathValidationError: If the configuration file path is invalid
    """
    try:
        config_file = Path(config_file_str).expanduser().resolve()
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid config file path: {e}") from e

    if not config_file.is_file():
        raise PathValidationError(f"Config file does not exist: {config_file}")

    return config_file


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for gettext-extractor.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="gettext-extractor",
        description="Extract gettext translation calls from Python source into a PO catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                    # Extract from current directory
  %(prog)s --source-dir app/                  # Extract from app/ directory
  %(prog)s --output locale/messages.pot       # Custom output file
  %(prog)s --config-file extractor.yml        # Load function names and headers
  %(prog)s --exclude tests --exclude docs     # Exclude directories
  %(prog)s --check                            # Fail if the catalog is stale
        """,
    )

    _ = parser.add_argument(
        "--source-dir",
        type=str,
        default=".",
        help="Source directory to scan for translation calls (default: current directory)",
        metavar="PATH",
    )

    _ = parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output catalog path (default: the configured file name, gettext.po)",
        metavar="PATH",
    )

    _ = parser.add_argument(
        "--config-file",
        type=str,
        default=None,
        help="YAML configuration file with function names, headers and base directory",
        metavar="PATH",
    )

    _ = parser.add_argument(
        "--base-directory",
        type=str,
        default=None,
        help="Prefix stripped from reference paths ('.' for the working directory)",
        metavar="PATH",
    )

    _ = parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Directory names to exclude from scanning (can be used multiple times)",
        metavar="NAME",
    )

    _ = parser.add_argument(
        "--verbose", action="store_true", help="Enable verbose logging"
    )

    _ = parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Extract and report without writing the catalog",
    )

    _ = parser.add_argument(
        "--ci-mode",
        action="store_true",
        help="Enable CI/CD mode with compact logging",
    )

    _ = parser.add_argument(
        "--check",
        action="store_true",
        help="Check mode: exit with 1 if the existing catalog is out of date",
    )

    _ = parser.add_argument(
        "--write-through",
        action="store_true",
        help="Rewrite the catalog after every extracted call-site",
    )

    _ = parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )

    return parser


def parse_arguments(args: list[str] | None = None) -> ParsedArgs:
    """
    Parse command-line arguments.

    Args:
        args: List of arguments to parse (defaults to sys.argv[1:])

    Returns:
        ParsedArgs with validated paths

    Raises:
        SystemExit: If argument parsing fails or --help is requested
        PathValidationError: If path validation fails
    """
    parser = create_argument_parser()
    parsed = parser.parse_args(args)

    source_dir_str: str = getattr(parsed, "source_dir", ".")
    output_str: str | None = getattr(parsed, "output", None)
    config_file_str: str | None = getattr(parsed, "config_file", None)

    source_dir = validate_source_dir(source_dir_str)
    config_file = (
        validate_config_file_path(config_file_str) if config_file_str else None
    )

    return ParsedArgs(
        source_dir=source_dir,
        output=Path(output_str) if output_str else None,
        config_file=config_file,
        base_directory=getattr(parsed, "base_directory", None),
        exclude=list(getattr(parsed, "exclude", None) or []),
        verbose=bool(getattr(parsed, "verbose", False)),
        dry_run=bool(getattr(parsed, "dry_run", False)),
        ci_mode=bool(getattr(parsed, "ci_mode", False)),
        check=bool(getattr(parsed, "check", False)),
        write_through=bool(getattr(parsed, "write_through", False)),
    )
