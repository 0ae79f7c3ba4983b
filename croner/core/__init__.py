"""
core - Chronological Rename Core Module

Provides file selection, timestamp resolution, rename plan generation and
two-phase execution.
"""

from .errors import (
    CronerError,
    InputError,
    NoMatchError,
    FileSystemError,
    PlanError,
    ResolutionError,
    RenameError,
    StageError,
)

from .models_fs import (
    FileRecord,
    RenameOp,
    RenamePlan,
    RenameOptions,
    TimestampSource,
)

from .scan_files import select_files

from .exif_reader import read_capture_time

from .timestamps import (
    resolve_timestamps,
    parse_capture_time,
    read_filesystem_time,
)

from .sort_rules import (
    sort_by_name,
)

from .plan_rename import (
    plan_chronological_rename,
    validate_plan,
    ConflictResolver,
)

from .exec_rename import (
    execute_rename,
    RenameResult,
)

from .safety_checks import validate_options

from .pipeline import (
    prepare_plan,
    run_chronological_rename,
)

__all__ = [
    # Errors
    "CronerError",
    "InputError",
    "NoMatchError",
    "FileSystemError",
    "PlanError",
    "ResolutionError",
    "RenameError",
    "StageError",

    # Data models
    "FileRecord",
    "RenameOp",
    "RenamePlan",
    "RenameOptions",
    "TimestampSource",
    "RenameResult",

    # Selection
    "select_files",

    # Timestamps
    "read_capture_time",
    "resolve_timestamps",
    "parse_capture_time",
    "read_filesystem_time",

    # Sorting
    "sort_by_name",

    # Planning
    "plan_chronological_rename",
    "validate_plan",
    "ConflictResolver",

    # Execution
    "execute_rename",
    "validate_options",

    # Pipeline
    "prepare_plan",
    "run_chronological_rename",
]
