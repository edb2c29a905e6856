"""Command line entry point: `python -m gpm_backend <directory>`."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

from gpm_shared.log import set_level
from gpm_shared.version import get_version

from .adapters.tools.exiftool import ExifTool
from .config import DEFAULT_TZ_OFFSET_HOURS, MIGRATE_CONCURRENCY
from .features.migrate import MigrationContext, migrate_flat
from .shared import get_logger
from .tool_detect import has_exiftool

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_USAGE = 2


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gpm-meta",
        description="Write Google Takeout sidecar metadata (time, description, GPS) into media files.",
    )
    parser.add_argument("directory", help="Takeout folder containing media files and their .json sidecars")
    parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="Also process sub-directories.",
    )
    parser.add_argument(
        "--offset-hours",
        type=float,
        default=DEFAULT_TZ_OFFSET_HOURS,
        help=f"Time zone offset used when a file has no offset of its own (default: {DEFAULT_TZ_OFFSET_HOURS:g}).",
    )
    parser.add_argument(
        "-j",
        "--concurrency",
        type=int,
        default=MIGRATE_CONCURRENCY,
        help=f"Files processed in parallel (default: {MIGRATE_CONCURRENCY}).",
    )
    parser.add_argument("--exiftool", default=None, help="Path to the exiftool executable.")
    parser.add_argument(
        "--no-fix-extensions",
        action="store_true",
        help="Do not rename files whose extension does not match their content.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        set_level(logging.DEBUG)

    directory = Path(args.directory).expanduser()
    if not directory.is_dir():
        logger.error("Directory not found: %s", directory)
        return EXIT_USAGE
    if not -12.0 <= args.offset_hours <= 14.0:
        logger.error("--offset-hours must be between -12 and 14, got %s", args.offset_hours)
        return EXIT_USAGE
    if not has_exiftool(args.exiftool):
        logger.error("ExifTool is required but was not found; install it or pass --exiftool")
        return EXIT_USAGE

    ctx = MigrationContext.from_config(
        ExifTool(bin_name=args.exiftool),
        default_offset_hours=args.offset_hours,
        concurrency=args.concurrency,
        fix_wrong_extensions=not args.no_fix_extensions,
    )
    report = asyncio.run(migrate_flat(ctx, directory, recursive=args.recursive))
    for err in report.errors:
        print(f"{err.code.value}\t{err.message}")
    return EXIT_OK if report.ok else EXIT_FAILURES
