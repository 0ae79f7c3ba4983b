"""
plan_rename.py - Rename Plan Generation Module

Responsibilities:
- Format each timestamp into a YYYYMMDD_HHMMSS name
- Disambiguate files sharing a second (auto add _1, _2...)
- Assign unique temporary names for the two-phase rename
- Output RenamePlan
"""

from pathlib import Path, PurePosixPath
from typing import List, Dict, Tuple
from collections import defaultdict
import uuid

from .models_fs import FileRecord, RenamePlan
from .scan_files import TEMP_PREFIX

NAME_FORMAT = "%Y%m%d_%H%M%S"


class ConflictResolver:
    """Counts how many earlier files produced each name key"""

    def __init__(self):
        # key: (sub-directory, timestamp key), value: files seen so far
        self.seen: Dict[Tuple[str, str], int] = defaultdict(int)

    def resolve(self, directory: str, key: str) -> Tuple[str, int]:
        """
        Return the key to use and how many earlier files shared it

        Args:
            directory: Sub-directory of the file ("" for top level)
            key: Timestamp key

        Returns:
            (actual key, number of earlier files with the same key)
        """
        n = self.seen[(directory, key)]
        self.seen[(directory, key)] = n + 1
        if n == 0:
            return key, 0
        return f"{key}_{n}", n


def _join(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


def temporary_name(record: FileRecord) -> str:
    """Unique intermediate name in the record's directory, same extension"""
    return _join(record.parent, f"{TEMP_PREFIX}{uuid.uuid4().hex}{record.suffix.lower()}")


def plan_chronological_rename(directory: Path, records: List[FileRecord]) -> RenamePlan:
    """
    Generate the chronological rename plan

    Records are processed in the given (resolution) order, so the first file
    of a second gets the bare name and later ones _1, _2...

    Args:
        directory: Target directory
        records: Resolved records

    Returns:
        Rename plan; temporary_name and final_name are set on each record
    """
    plan = RenamePlan(directory=Path(directory))
    resolver = ConflictResolver()

    for record in records:
        key, earlier = resolver.resolve(record.parent, record.timestamp.strftime(NAME_FORMAT))

        record.final_name = _join(record.parent, f"{key}{record.suffix.lower()}")
        record.temporary_name = temporary_name(record)

        note = ""
        if earlier:
            note = f"same timestamp as {earlier} earlier file(s)"

        plan.add_op(record.name, record.temporary_name, record.final_name, note)

    return plan


def validate_plan(plan: RenamePlan) -> List[str]:
    """
    Validate rename plan

    Args:
        plan: Rename plan

    Returns:
        Error list
    """
    errors = []

    for op in plan.ops:
        if not (plan.directory / op.original).exists():
            errors.append(f"Source file does not exist: {op.original}")
        if PurePosixPath(op.original).parent != PurePosixPath(op.final).parent:
            errors.append(f"Rename would move the file to another directory: {op.original} -> {op.final}")

    # New names must also be unique on case-insensitive filesystems
    for column in ("original", "temporary", "final"):
        seen: Dict[str, List[str]] = defaultdict(list)
        for op in plan.ops:
            name = getattr(op, column)
            seen[name if column == "original" else name.casefold()].append(op.original)
        for name, originals in seen.items():
            if len(originals) > 1:
                errors.append(f"Multiple files have the same {column} name: {originals} -> {name}")

    return errors
