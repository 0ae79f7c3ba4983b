"""
cli_entry.py - CLI Entry Point

Parses and validates the command line, runs the chronological rename and
maps the outcome to an exit code
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..core import (
    CronerError, RenameOptions, RenamePlan, TimestampSource,
    execute_rename, prepare_plan
)
from ..logger_setup import LEVELS, parse_level, setup_logging

TOOL_NAME = "croner"


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser"""
    parser = argparse.ArgumentParser(
        prog=TOOL_NAME,
        description=(
            "Chronologically orders image files in a folder based on their EXIF "
            "capture date. New file names take the form YYYYMMDD_HHMMSS.jpg"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {TOOL_NAME}
  {TOOL_NAME} -f ./pictures/ -p "IMG_*.jpg" -i
  {TOOL_NAME} -f ./pictures/ -t mtime --dry-run
"""
    )

    parser.add_argument("-f", "--folder", type=str, default=".",
                        help="Folder of the files to be sorted, defaults to current directory")
    parser.add_argument("-p", "--pattern", type=str, default="*.jpg",
                        help="Glob filename pattern to match, defaults to '*.jpg' (always case-insensitive)")
    parser.add_argument("-i", "--ignore-errors", action="store_true",
                        help="Skip files whose timestamp cannot be read or that fail to rename")
    parser.add_argument("-t", "--timestamp", type=str, default=TimestampSource.EXIF.value,
                        choices=[s.value for s in TimestampSource],
                        help="Timestamp to order files by")
    parser.add_argument("-v", "--verbose", nargs="?", const="", default=None, metavar="LEVEL",
                        help=f"Logging level, one of {', '.join(LEVELS)} (default info, no value means debug)")
    parser.add_argument("-n", "--dry-run", action="store_true",
                        help="Preview only, do not execute")
    parser.add_argument("--log-file", type=str, default=None,
                        help="Also write debug logs to this file")

    return parser


def print_start():
    print(f"\n<{TOOL_NAME} -\n")


def print_end():
    print(f"\n- {TOOL_NAME}>")


def print_plan(plan: RenamePlan, limit: int = 20):
    """Show preview of a rename plan"""
    print()
    print(f"Will perform {plan.total_count} rename operations:")
    print("-" * 80)
    for op in plan.ops[:limit]:
        note = f" ({op.note})" if op.note else ""
        print(f"  {op.original:<40} -> {op.final}{note}")
    if len(plan.ops) > limit:
        print(f"  ... and {len(plan.ops) - limit} more operations")
    print("-" * 80)


def build_options(args: argparse.Namespace) -> RenameOptions:
    """Turn parsed arguments into run options"""
    return RenameOptions(
        directory=Path(args.folder.replace("\\", "/")),
        pattern=args.pattern,
        timestamp_source=TimestampSource(args.timestamp),
        ignore_errors=args.ignore_errors,
        dry_run=args.dry_run,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        level = parse_level(args.verbose)
    except ValueError as e:
        parser.error(str(e))

    log = logging.getLogger(TOOL_NAME)
    print_start()

    try:
        log = setup_logging(level, args.log_file)
        options = build_options(args)
        plan = prepare_plan(options, log)

        if options.dry_run:
            print_plan(plan)
            print("\n[Preview mode] Will not actually execute")
            return 0

        result = execute_rename(
            plan,
            ignore_errors=options.ignore_errors,
            rename_limit=options.rename_limit,
            logger=log,
        )
        print(result.summary())
        log.info("Successfully renamed all files" if not result.failed else
                 f"Renamed {result.success_count} files, skipped {result.failed_count}")
        return 0
    except CronerError as e:
        log.error(f"Failed to order files - {e}")
        return 1
    except KeyboardInterrupt:
        log.error("Interrupted")
        return 130
    except Exception as e:
        log.error(f"Failed running {TOOL_NAME} due to exception - {e}")
        log.error(f"Run {TOOL_NAME} again with -v to see the full traceback")
        log.debug("Unexpected exception", exc_info=True)
        return 1
    finally:
        print_end()


if __name__ == "__main__":
    sys.exit(main())
