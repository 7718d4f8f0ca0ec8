"""Helper functions for build_reports CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import parse_directory


def parse_build_reports_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for build_reports."""

    parser = argparse.ArgumentParser(
        prog="wiki-status",
        description="Build per-locale translation status reports for a wiki checkout.",
    )

    # Input options
    parser.add_argument(
        "wiki_directory",
        type=lambda v: parse_directory(v, "wiki directory"),
        help="Root of the wiki repository (contains wiki/ and meta/)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config name or path to a YAML file (default: $CONFIG_ENV or 'default')",
    )
    parser.add_argument(
        "--locale",
        action="append",
        dest="locales",
        default=None,
        help="Only build reports for this locale (repeatable, default: all configured locales)",
    )

    # Output options
    parser.add_argument("output_directory", help="Directory to write JSON reports to")
    parser.add_argument("--no-diffs", action="store_true", help="Skip building diff pages")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)
