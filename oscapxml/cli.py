#!/usr/bin/env python3
"""
oscapxml command line interface

Parses an SCAP source data stream (or a standalone XCCDF 1.2 benchmark)
and prints its data streams, checklists and profiles.

Usage:
    oscapxml ssg-rhel8-ds.xml
    oscapxml ssg-rhel8-ds.xml --log-level DEBUG
    python -m oscapxml ssg-rhel8-xccdf.xml
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from .config import get_settings
from .exceptions import ContentError
from .models import Benchmark
from .parsers import parse_content
from .report import render_benchmark_report, render_report

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oscapxml",
        description="Show the data streams, checklists and profiles of SCAP content",
    )
    parser.add_argument("filepath", help="Path to the SCAP source data stream")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level (default: OSCAPXML_LOG_LEVEL or WARNING)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI interface"""
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid oscapxml settings: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(level=args.log_level or settings.log_level, format=settings.log_format)

    try:
        document = parse_content(args.filepath)
        if isinstance(document, Benchmark):
            report = render_benchmark_report(document)
        else:
            report = render_report(document)
    except (ContentError, OSError) as e:
        logger.debug("Parsing %s failed", args.filepath, exc_info=True)
        print(f"Failed to parse SCAP Source data stream file '{args.filepath}': {e}")
        return 1

    print(report, end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
