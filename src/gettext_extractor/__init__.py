"""
gettext-extractor - Extract gettext translation calls into a deterministic PO catalog.
"""

import sys

from .main import main as run_main


def main() -> None:
    """Console entry point."""
    sys.exit(run_main())


__all__ = ["main"]
