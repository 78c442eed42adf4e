"""
Concordance DAT command-line tool.

Usage:
    concordance-dat header export.dat
    concordance-dat count data/*.dat --progress-every 100000
    concordance-dat read export.dat --limit 10 --empty-field omit
    concordance-dat split export.dat --output-dir splits --max-rows 5000

Options are read from config/dat_options.yaml (or --config) and
CONCORDANCE_* environment variables; a .env file is loaded first.
CONCORDANCE_LOG_LEVEL sets the log level when neither -v nor -q is given.
"""

import argparse
import json
import logging
import sys
import time
from dataclasses import replace
from itertools import islice
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

from .common.config_loader import load_options, parse_empty_field
from .common.log_config import setup_logging
from .dat import get_count, get_header, read, split_dat
from .dat.errors import DatError
from .dat.splitter import DEFAULT_MAX_ROWS
from .models import DatFileOptions, EmptyField

logger = logging.getLogger(__name__)

# Errors reported per file; anything else is a bug and propagates
FILE_ERRORS = (DatError, OSError, ValueError)

DEFAULT_PROGRESS_EVERY = 100_000


def _log_failures(errors: Dict[str, str]) -> None:
    for path, message in errors.items():
        logger.error("%s: %s", path, message)


def cmd_header(args: argparse.Namespace, options: DatFileOptions) -> int:
    """Print header field names, one per line."""
    errors: Dict[str, str] = {}
    for path in args.files:
        try:
            header = get_header(path)
        except FILE_ERRORS as e:
            errors[path] = str(e)
            continue
        logger.info("Found %d fields in the header of %s", len(header), path)
        if len(args.files) > 1:
            print(f"# {path}")
        for name in header:
            print(name)

    _log_failures(errors)
    return 1 if errors else 0


def cmd_count(args: argparse.Namespace, options: DatFileOptions) -> int:
    """Count rows in each file and log throughput."""
    total_rows = 0
    total_seconds = 0.0
    file_count = 0
    errors: Dict[str, str] = {}
    total_watch = time.perf_counter()

    for path in args.files:
        logger.info("Reading %s", path)
        started = time.perf_counter()

        def progress(header, rows, path=path):
            if rows == 0:
                logger.info("Found %d fields in the header.", len(header))
            else:
                logger.debug("%s: %d rows", path, rows)
            return args.progress_every

        try:
            header, rows = get_count(path, progress=progress, options=options)
        except FILE_ERRORS as e:
            errors[path] = str(e)
            logger.error("Error in %s: %s", path, e)
            continue

        seconds = time.perf_counter() - started
        rows_per_second = rows / seconds if seconds > 0 else 0
        logger.info("Read %d rows in %.2fs (%.2f rows/sec)", rows, seconds, rows_per_second)
        print(f"{path}\t{rows}")

        total_rows += rows
        total_seconds += seconds
        file_count += 1

    _log_failures(errors)
    avg_rows_per_second = total_rows / total_seconds if total_seconds > 0 else 0
    logger.info(
        "Total %d rows completed in %.2fs for %d files (%d failed) | Avg rows/sec: %.2f",
        total_rows, time.perf_counter() - total_watch, file_count, len(errors), avg_rows_per_second,
    )
    return 1 if errors else 0


def cmd_read(args: argparse.Namespace, options: DatFileOptions) -> int:
    """Print records as JSON lines."""
    records = read(args.file, options=options)
    if args.limit:
        records = islice(records, args.limit)

    try:
        for record in records:
            print(json.dumps(dict(record.items()), ensure_ascii=False))
    except FILE_ERRORS as e:
        logger.error("%s: %s", args.file, e)
        return 1
    return 0


def cmd_split(args: argparse.Namespace, options: DatFileOptions) -> int:
    """Split a file into numbered parts."""
    output_dir = args.output_dir or str(Path(args.file).parent / "splits")
    logger.info("Splitting %s into chunks of %d rows in %s", args.file, args.max_rows, output_dir)

    try:
        files = split_dat(args.file, output_dir, args.max_rows, options=options)
    except FILE_ERRORS as e:
        logger.error("Failed to split %s: %s", args.file, e)
        return 1

    logger.info("Split complete for %s: %d files", args.file, files)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="concordance-dat",
        description="Inspect, count and split Concordance DAT files",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--config", "-c", help="YAML options file (default: config/dat_options.yaml)")

    sub = parser.add_subparsers(dest="command", required=True)

    p_header = sub.add_parser("header", help="Print header field names")
    p_header.add_argument("files", nargs="+", help="DAT files")
    p_header.set_defaults(func=cmd_header)

    p_count = sub.add_parser("count", help="Count data rows")
    p_count.add_argument("files", nargs="+", help="DAT files")
    p_count.add_argument(
        "--progress-every",
        type=int,
        default=DEFAULT_PROGRESS_EVERY,
        help=f"Log progress every N rows (default: {DEFAULT_PROGRESS_EVERY})",
    )
    p_count.set_defaults(func=cmd_count)

    p_read = sub.add_parser("read", help="Print records as JSON lines")
    p_read.add_argument("file", help="DAT file")
    p_read.add_argument("--limit", "-l", type=int, default=0, help="Max records to print (0 = all)")
    p_read.add_argument(
        "--empty-field",
        choices=[m.value for m in EmptyField],
        help="How empty fields are printed (default from config: null)",
    )
    p_read.set_defaults(func=cmd_read)

    p_split = sub.add_parser("split", help="Split into files of at most N rows")
    p_split.add_argument("file", help="DAT file")
    p_split.add_argument("--output-dir", "-o", help="Output directory (default: <input dir>/splits)")
    p_split.add_argument(
        "--max-rows", "-n",
        type=int,
        default=DEFAULT_MAX_ROWS,
        help=f"Max rows per file (default: {DEFAULT_MAX_ROWS})",
    )
    p_split.set_defaults(func=cmd_split)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(verbose=args.verbose, quiet=args.quiet)
    except ValueError as e:
        setup_logging(quiet=True, env={})
        logger.error("Invalid configuration: %s", e)
        return 2

    try:
        options = load_options(args.config)
    except (OSError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if getattr(args, "empty_field", None):
        options = replace(options, empty_field=parse_empty_field(args.empty_field))

    try:
        return args.func(args, options)
    except KeyboardInterrupt:
        logger.warning("User break (Ctrl+C) detected. Shutting down...")
        return 130


if __name__ == "__main__":
    sys.exit(main())
