"""
timestamps.py - Timestamp Resolution Module

Responsibilities:
- Read one reference timestamp per file (EXIF capture time or a stat field)
- Bounded concurrency for EXIF decoding
- Apply the error-tolerance policy to per-file failures
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional
import logging
import os

from .errors import FileSystemError, NoMatchError, ResolutionError, StageError
from .exif_reader import read_capture_time
from .models_fs import FileRecord, TimestampSource

READ_LIMIT = 5

CAPTURE_TIME_FORMATS = ("%Y:%m:%d %H:%M:%S", "%Y/%m/%d %H:%M:%S")

_STAT_FIELDS = {
    TimestampSource.ATIME: "st_atime",
    TimestampSource.CTIME: "st_ctime",
    TimestampSource.MTIME: "st_mtime",
    TimestampSource.BIRTHTIME: "st_birthtime",
}

Decoder = Callable[[Path], Optional[str]]

_log = logging.getLogger(__name__)


def parse_capture_time(text: str) -> datetime:
    """
    Parse EXIF capture time text

    Expects "2017:05:06 13:21:02", with "2017/05/06 13:21:02" accepted too.

    Raises:
        ValueError: Text matches neither format
    """
    cleaned = text.strip().strip("\x00").strip()
    for fmt in CAPTURE_TIME_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    raise ValueError(f"Found invalid exif date '{text}', unable to parse")


def read_filesystem_time(path: Path, source: TimestampSource) -> datetime:
    """
    Read a timestamp from os.stat

    Creation time falls back to st_ctime where the platform has no st_birthtime.

    Raises:
        OSError: stat failed
    """
    st = os.stat(path)
    field = _STAT_FIELDS[source]
    if not hasattr(st, field):
        field = "st_ctime"
    return datetime.fromtimestamp(getattr(st, field))


def _resolve_capture_time(record: FileRecord, directory: Path, decoder: Decoder,
                          log: logging.Logger) -> FileRecord:
    """Resolve one record from image metadata, recording failure on the record"""
    path = record.path_in(directory)
    log.debug(f"Reading exif data of file '{record.name}'")

    try:
        text = decoder(path)
    except Exception as e:
        # Whatever the decoder raises only concerns this file
        record.resolution_error = ResolutionError(
            record.name, f"Failed reading Exif information - {e}")
        return record

    if not text:
        record.resolution_error = ResolutionError(record.name, "No capture time in Exif information")
        return record

    try:
        record.timestamp = parse_capture_time(text)
    except ValueError as e:
        record.resolution_error = ResolutionError(record.name, str(e))
    return record


def apply_error_policy(
    records: List[FileRecord],
    ignore_errors: bool,
    logger: Optional[logging.Logger] = None
) -> List[FileRecord]:
    """
    Decide what happens to records whose resolution failed

    Args:
        records: Records after resolution
        ignore_errors: Drop failed records instead of aborting

    Returns:
        Resolved records, in their original order

    Raises:
        StageError: Some records failed and errors are not ignored
        NoMatchError: No record is left
    """
    log = logger or _log
    failures = [r.resolution_error for r in records if not r.ok]

    for error in failures:
        log.debug(f"Timestamp resolution failed - {error}")

    if failures and not ignore_errors:
        raise StageError("getting timestamp information", failures)

    if failures:
        log.warning(f"Skipping {len(failures)} file(s) without a usable timestamp")

    resolved = [r for r in records if r.ok]
    if not resolved:
        raise NoMatchError("No files left with a usable timestamp")
    return resolved


def resolve_timestamps(
    records: List[FileRecord],
    directory: Path,
    ignore_errors: bool = False,
    read_limit: int = READ_LIMIT,
    decoder: Decoder = read_capture_time,
    logger: Optional[logging.Logger] = None
) -> List[FileRecord]:
    """
    Resolve a timestamp for every record

    Each record is resolved from its own timestamp_source: stat fields are
    read directly, EXIF capture times through a bounded pool.

    Args:
        records: Selected records
        directory: Target directory
        ignore_errors: Drop failed records instead of aborting
        read_limit: Concurrent metadata reads
        decoder: Capture time reader, path -> raw text or None
        logger: Logger to report to

    Returns:
        Resolved records, in input order

    Raises:
        StageError: Some records failed and errors are not ignored
        NoMatchError: No record is left
        FileSystemError: stat failed for a filesystem timestamp
    """
    log = logger or _log
    directory = Path(directory)

    stat_records = [r for r in records if r.timestamp_source.is_filesystem]
    exif_records = [r for r in records if not r.timestamp_source.is_filesystem]

    if stat_records:
        sources = sorted({r.timestamp_source.value for r in stat_records})
        log.info(f"Skipping loading of Exif information, ordering by {', '.join(sources)}")
    for record in stat_records:
        try:
            record.timestamp = read_filesystem_time(record.path_in(directory), record.timestamp_source)
        except OSError as e:
            raise FileSystemError(
                f"Failed reading file ({record.name}) information - {e}") from e

    if exif_records:
        log.debug(f"Getting exif information for {len(exif_records)} files...")
        with ThreadPoolExecutor(max_workers=read_limit) as pool:
            list(pool.map(
                lambda r: _resolve_capture_time(r, directory, decoder, log), exif_records))

    return apply_error_policy(records, ignore_errors, log)
