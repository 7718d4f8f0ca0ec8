"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path


def setup_logging(verbose: bool = False) -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def parse_directory(value: str, field_name: str = "directory") -> Path:
    """Parse an existing directory path for argparse arguments.

    Args:
        value: Path string.
        field_name: Name of the field for error messages.

    Returns:
        Resolved Path.

    Raises:
        argparse.ArgumentTypeError: If the path is not an existing directory.
    """
    path = Path(value).expanduser().resolve()
    if not path.is_dir():
        raise argparse.ArgumentTypeError(f"{field_name} must be an existing directory: {value}")
    return path
