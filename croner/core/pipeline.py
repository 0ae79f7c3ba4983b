"""
pipeline.py - Chronological Rename Pipeline

Selector -> Resolver -> Name Generator -> Executor, each stage run to
completion before the next starts.
"""

from typing import Optional
import logging

from .errors import PlanError
from .exec_rename import ProgressCallback, RenameResult, execute_rename
from .models_fs import RenameOptions, RenamePlan
from .plan_rename import plan_chronological_rename, validate_plan
from .safety_checks import validate_options
from .scan_files import select_files
from .timestamps import Decoder, read_capture_time, resolve_timestamps

_log = logging.getLogger(__name__)


def prepare_plan(
    options: RenameOptions,
    logger: Optional[logging.Logger] = None,
    decoder: Decoder = read_capture_time
) -> RenamePlan:
    """
    Select, resolve and name the files without touching them

    Raises:
        InputError, NoMatchError, FileSystemError, StageError, PlanError
    """
    log = logger or _log
    options = validate_options(options)

    log.info(f"Start ordering files in '{options.directory}'")
    log.info(f"Pattern is '{options.pattern}'")

    records = select_files(options.directory, options.pattern, options.timestamp_source, log)
    records = resolve_timestamps(
        records,
        options.directory,
        ignore_errors=options.ignore_errors,
        read_limit=options.read_limit,
        decoder=decoder,
        logger=log,
    )

    plan = plan_chronological_rename(options.directory, records)
    problems = validate_plan(plan)
    if problems:
        for problem in problems:
            log.debug(problem)
        raise PlanError(f"Rename plan is inconsistent ({len(problems)} problem(s)): {problems[0]}")

    log.debug(plan.summary())
    return plan


def run_chronological_rename(
    options: RenameOptions,
    logger: Optional[logging.Logger] = None,
    progress_callback: Optional[ProgressCallback] = None,
    decoder: Decoder = read_capture_time
) -> RenameResult:
    """
    Rename the files of a directory into chronological order

    Args:
        options: Run configuration
        logger: Logger to report to
        progress_callback: Progress callback (current, total, message)
        decoder: Capture time reader

    Returns:
        Execution result

    Raises:
        CronerError: Any stage failed; the message names the stage
    """
    log = logger or _log
    plan = prepare_plan(options, log, decoder)

    result = execute_rename(
        plan,
        ignore_errors=options.ignore_errors,
        rename_limit=options.rename_limit,
        dry_run=options.dry_run,
        progress_callback=progress_callback,
        logger=log,
    )

    log.info("Successfully renamed all files" if not result.failed else
             f"Renamed files with {result.failed_count} skipped")
    return result
