"""
safety_checks.py - Safety Check Module

Validates the run configuration before any file is touched and provides
the no-clobber rename used by the executor
"""

from pathlib import Path, PurePosixPath
from typing import Tuple, Optional
import os

from .errors import InputError
from .models_fs import RenameOptions, TimestampSource
from .text_match import compile_pattern


def check_directory(path: Path) -> Tuple[bool, Optional[str]]:
    """
    Check that path is an existing, listable directory

    Args:
        path: Path to check

    Returns:
        (is_valid, error_reason)
    """
    if not path.exists():
        return False, f"Folder [{path}] doesn't exist or is not accessible"
    if not path.is_dir():
        return False, f"[{path}] is not a folder"
    if not os.access(path, os.R_OK | os.X_OK):
        return False, f"Folder [{path}] is not readable"
    return True, None


def check_writable(path: Path) -> Tuple[bool, Optional[str]]:
    """
    Check if entries of a directory can be renamed

    Args:
        path: Directory to check

    Returns:
        (is_writable, error_reason)
    """
    if not os.access(path, os.W_OK):
        return False, f"Directory is not writable: {path}"
    return True, None


def check_pattern(pattern: str) -> Tuple[bool, Optional[str]]:
    """
    Check that a glob pattern compiles and stays inside the directory

    Args:
        pattern: Glob pattern

    Returns:
        (is_valid, error_reason)
    """
    try:
        compile_pattern(pattern)
    except ValueError as e:
        return False, f"Input pattern [{pattern}] isn't valid: {e}"

    posix = PurePosixPath(pattern)
    if posix.is_absolute() or ".." in posix.parts:
        return False, f"Input pattern [{pattern}] must be relative to the folder"

    return True, None


def validate_options(options: RenameOptions) -> RenameOptions:
    """
    Validate a run configuration

    Args:
        options: Configuration built by the CLI or GUI

    Returns:
        The same options with the directory resolved

    Raises:
        InputError: Configuration is not usable
    """
    directory = Path(options.directory).expanduser()

    valid, error = check_directory(directory)
    if not valid:
        raise InputError(error)

    if not options.dry_run:
        valid, error = check_writable(directory)
        if not valid:
            raise InputError(error)

    valid, error = check_pattern(options.pattern)
    if not valid:
        raise InputError(error)

    if not isinstance(options.timestamp_source, TimestampSource):
        raise InputError(f"Unknown timestamp source: {options.timestamp_source!r}")

    if options.read_limit < 1 or options.rename_limit < 1:
        raise InputError("Concurrency limits must be at least 1")

    options.directory = directory.resolve()
    return options


def rename_no_clobber(src: Path, dst: Path) -> None:
    """
    Rename src to dst, refusing to replace an existing entry

    os.rename silently replaces files on POSIX, so the destination is checked
    first. A case-only change of the same file is allowed.

    Raises:
        FileExistsError: Destination is occupied by another file
        OSError: The rename itself failed
    """
    if os.path.lexists(dst) and not _is_same_entry(src, dst):
        raise FileExistsError(f"Destination already exists: {dst}")
    os.rename(src, dst)


def _is_same_entry(src: Path, dst: Path) -> bool:
    try:
        return os.path.samefile(src, dst)
    except OSError:
        return False
