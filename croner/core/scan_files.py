"""
scan_files.py - File Selection Module

Lists the target directory and keeps the regular files matching the pattern
"""

from pathlib import Path
from typing import List, Optional, Iterator
import logging
import os
import stat

from .errors import FileSystemError, NoMatchError
from .models_fs import FileRecord, TimestampSource
from .sort_rules import sort_by_name
from .text_match import compile_pattern, is_recursive, matches

TEMP_PREFIX = ".__tmp_rename__"

_log = logging.getLogger(__name__)


def _walk_names(directory: Path, recursive: bool) -> Iterator[str]:
    """Yield entry names relative to directory, POSIX separated"""
    if not recursive:
        yield from os.listdir(directory)
        return

    def on_error(e: OSError) -> None:
        raise e

    for dirpath, dirnames, filenames in os.walk(directory, onerror=on_error):
        rel = Path(dirpath).relative_to(directory).as_posix()
        prefix = "" if rel == "." else rel + "/"
        dirnames.sort()
        for name in dirnames + filenames:
            yield prefix + name


def select_files(
    directory: Path,
    pattern: str,
    timestamp_source: TimestampSource = TimestampSource.EXIF,
    logger: Optional[logging.Logger] = None
) -> List[FileRecord]:
    """
    Select the files to rename

    Args:
        directory: Target directory
        pattern: Glob pattern (case-insensitive); recursive if it contains "/"
        timestamp_source: Timestamp source stamped on every record
        logger: Logger to report to

    Returns:
        Records sorted by name

    Raises:
        NoMatchError: Nothing matched
        FileSystemError: Directory or entry could not be read
    """
    log = logger or _log
    directory = Path(directory)
    compiled = compile_pattern(pattern)

    log.debug("Reading folder contents...")
    try:
        names = list(_walk_names(directory, is_recursive(pattern)))
    except OSError as e:
        raise FileSystemError(f"Failed reading folder contents - {e}") from e
    log.debug(f"Found {len(names)} items")

    matched = [n for n in names if matches(n, compiled)]
    log.debug(f"Found {len(matched)} items matching pattern '{pattern}'")

    records: List[FileRecord] = []
    for name in matched:
        if Path(name).name.startswith(TEMP_PREFIX):
            continue
        try:
            st = os.stat(directory / name, follow_symlinks=False)
        except OSError as e:
            raise FileSystemError(f"Failed reading file ({name}) information - {e}") from e
        # Only regular files, never directories or links
        if not stat.S_ISREG(st.st_mode):
            log.debug(f"Skipping '{name}', not a regular file")
            continue
        records.append(FileRecord(name=name, timestamp_source=timestamp_source))

    if not records:
        raise NoMatchError(f"No files found matching the pattern '{pattern}'")

    log.info(f"Selected {len(records)} files in '{directory}'")
    return sort_by_name(records)
