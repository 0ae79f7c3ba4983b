"""
exec_rename.py - Rename Execution Module

Responsibilities:
- Two-phase execution (first rename to temporary name, then to final name)
- Bounded concurrency per phase
- Error-tolerance policy and logging
- dry_run support
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Optional, Callable
import logging

from .errors import RenameError, StageError
from .models_fs import RenamePlan, RenameOp
from .safety_checks import rename_no_clobber

RENAME_LIMIT = 30

ProgressCallback = Callable[[int, int, str], None]

_log = logging.getLogger(__name__)


@dataclass
class RenameResult:
    """Rename execution result"""
    success: List[RenameOp] = field(default_factory=list)
    failed: List[Tuple[RenameOp, str]] = field(default_factory=list)  # (op, error_msg)

    @property
    def success_count(self) -> int:
        return len(self.success)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    def summary(self) -> str:
        """Generate summary"""
        lines = [
            f"Execution Result:",
            f"  - Success: {self.success_count}",
            f"  - Failed: {self.failed_count}",
        ]
        if self.failed:
            lines.append("Failure Details:")
            for op, error in self.failed[:10]:  # Show at most 10
                lines.append(f"  - {op.original} -> {op.final}: {error}")
            if len(self.failed) > 10:
                lines.append(f"  ... and {len(self.failed) - 10} more failures")
        return "\n".join(lines)


def _phase_names(op: RenameOp, phase: int) -> Tuple[str, str]:
    if phase == 1:
        return op.original, op.temporary
    return op.temporary, op.final


def _run_phase(
    directory: Path,
    ops: List[RenameOp],
    phase: int,
    rename_limit: int,
    progress: Callable[[str], None],
    log: logging.Logger
) -> Tuple[List[RenameOp], List[Tuple[RenameOp, RenameError]]]:
    """
    Rename every op of one phase, collecting outcomes

    Returns:
        (succeeded ops, [(op, error)]) both in plan order
    """
    def rename_one(op: RenameOp) -> Optional[RenameError]:
        src, dst = _phase_names(op, phase)
        try:
            rename_no_clobber(directory / src, directory / dst)
        except OSError as e:
            return RenameError(src, dst, phase, str(e))
        return None

    outcomes: List[Optional[RenameError]] = [None] * len(ops)

    with ThreadPoolExecutor(max_workers=rename_limit) as pool:
        futures = {pool.submit(rename_one, op): i for i, op in enumerate(ops)}
        for future in as_completed(futures):
            i = futures[future]
            outcomes[i] = future.result()
            src, dst = _phase_names(ops[i], phase)
            if outcomes[i] is None:
                log.debug(f"[Phase {phase}] Renamed '{src}' to '{dst}'")
            else:
                log.debug(f"[Phase {phase}] {outcomes[i]}")
            progress(f"[Phase {phase}] {src} -> {dst}")

    succeeded = [op for op, error in zip(ops, outcomes) if error is None]
    failed = [(op, error) for op, error in zip(ops, outcomes) if error is not None]
    return succeeded, failed


def _report_stranded(ops: List[RenameOp], log: logging.Logger) -> None:
    """Log files left at their temporary name"""
    for op in ops:
        log.error(f"File '{op.original}' was left at temporary name '{op.temporary}'")


def execute_rename(
    plan: RenamePlan,
    ignore_errors: bool = False,
    rename_limit: int = RENAME_LIMIT,
    dry_run: bool = False,
    progress_callback: Optional[ProgressCallback] = None,
    logger: Optional[logging.Logger] = None
) -> RenameResult:
    """
    Execute rename plan (two-phase)

    Args:
        plan: Rename plan
        ignore_errors: Skip failed renames instead of aborting
        rename_limit: Concurrent renames per phase
        dry_run: Whether to preview only
        progress_callback: Progress callback (current, total, message)
        logger: Logger to report to

    Returns:
        Execution result

    Raises:
        StageError: A rename failed and errors are not ignored; renames
            already performed are not rolled back
    """
    log = logger or _log
    result = RenameResult()
    ops = plan.ops
    total = len(ops)

    if total == 0:
        return result

    if dry_run:
        # Preview mode only
        for i, op in enumerate(ops):
            if progress_callback:
                progress_callback(i + 1, total, f"[Preview] {op.original} -> {op.final}")
            result.success.append(op)
        return result

    done = 0

    def progress(message: str) -> None:
        nonlocal done
        done += 1
        if progress_callback:
            progress_callback(done, total * 2, message)

    # Phase 1: Rename all to temporary names
    log.debug("Renaming files to temporary names...")
    moved, failed = _run_phase(plan.directory, ops, 1, rename_limit, progress, log)

    if failed and not ignore_errors:
        _report_stranded(moved, log)
        raise StageError("renaming files to temporary names", [e for _, e in failed])
    for op, error in failed:
        log.warning(f"Skipping '{op.original}' - {error.reason}")
        result.failed.append((op, str(error)))

    # Phase 2: Rename from temporary names to final names
    done = total
    log.debug("Renaming files to be in chronological order...")
    renamed, failed = _run_phase(plan.directory, moved, 2, rename_limit, progress, log)

    if failed and not ignore_errors:
        _report_stranded([op for op, _ in failed], log)
        raise StageError("renaming files to final names", [e for _, e in failed])
    for op, error in failed:
        log.warning(f"Skipping '{op.original}' - {error.reason}")
        result.failed.append((op, str(error)))
    _report_stranded([op for op, _ in failed], log)

    result.success.extend(renamed)
    log.info(f"Renamed {result.success_count} of {total} files")
    return result
