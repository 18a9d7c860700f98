"""
Main entry point for gettext-extractor.

This module wires the command line to the extraction engine: it sets up
logging, loads configuration, scans the source tree and writes (or checks)
the resulting catalog.
"""

import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from .config.manager import ConfigManager
from .config.schema import ExtractorConfig
from .extraction.session import ExtractionSession
from .output.po_writer import CatalogWriter, catalog_is_current
from .source.scanner import EXCLUDED_DIRS, scan_directory
from .utils.cli.args import ParsedArgs, PathValidationError, parse_arguments
from .utils.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, ci_mode: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        verbose: Enable verbose logging
        ci_mode: Use the compact CI log format
    """
    level = logging.DEBUG if verbose else logging.INFO
    if ci_mode:
        log_format = "::%(levelname)s::%(message)s" if verbose else "%(message)s"
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def load_configuration(args: ParsedArgs) -> ExtractorConfig:
    """
    Build the effective configuration: file values, then command-line overrides.

    Args:
        args: Parsed command-line arguments

    Returns:
        Validated configuration
    """
    config = (
        ConfigManager.load_config(args.config_file)
        if args.config_file is not None
        else ExtractorConfig()
    )

    return ConfigManager.apply_overrides(
        config,
        file_name=str(args.output) if args.output is not None else None,
        base_directory=args.base_directory,
        exclude_dirs=args.exclude or None,
        write_through=True if args.write_through else None,
    )


def run(args: ParsedArgs) -> int:
    """
    Run an extraction with parsed arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error or a stale catalog in check mode)
    """
    try:
        config = load_configuration(args)
        session = ExtractionSession(config)

        exclude_dirs: set[str] = EXCLUDED_DIRS.copy()
        exclude_dirs.update(config.exclude_dirs)

        if not args.ci_mode:
            logger.info(f"Scanning source directory: {args.source_dir}")
            logger.info(f"Output file: {session.file_name}")
            logger.info(f"Excluded directories: {', '.join(sorted(exclude_dirs))}")

        writes_enabled = not (args.dry_run or args.check)
        writer = CatalogWriter(write_through=config.write_through and writes_enabled)
        writer.attach(session)

        result = scan_directory(session, args.source_dir, exclude_dirs)
        output_file = Path(session.file_name)

        if args.check:
            if catalog_is_current(session.catalog, output_file):
                logger.info(f"Translation catalog is up to date: {output_file}")
                return 0
            logger.error(f"Translation catalog needs update: {output_file}")
            return 1

        if args.dry_run:
            logger.info(
                f"DRY RUN: Would write {len(session.catalog)} entries to {output_file}"
            )
            return 0

        _ = writer.flush(session)

        if args.ci_mode:
            logger.info(f"✅ String extraction completed: {output_file}")
        else:
            logger.info("String extraction completed successfully!")
            logger.info(
                f"Generated catalog with {len(session.catalog)} entries "
                f"from {result.file_count} file(s): {output_file}"
            )
        return 0

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except (ValidationError, yaml.YAMLError, ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1
    except Exception as e:
        logger.error(f"Error during string extraction: {e}")
        if args.verbose:
            logger.exception("Full traceback:")
        return 1


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the command line.

    Args:
        argv: Arguments to parse (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        args = parse_arguments(argv)
    except PathValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(args.verbose, args.ci_mode)
    return run(args)
