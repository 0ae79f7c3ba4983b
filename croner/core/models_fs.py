"""
models_fs.py - Core Data Structure Definitions

Contains:
- TimestampSource: Which timestamp orders the files
- FileRecord: One file being processed
- RenameOp: Single (original, temporary, final) rename triple
- RenamePlan: Batch rename plan
- RenameOptions: Validated run configuration
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Optional, List
from enum import Enum

from .errors import ResolutionError


class TimestampSource(Enum):
    """Timestamp source enumeration"""
    EXIF = "exif"             # Capture time embedded in the image
    ATIME = "atime"           # Access time
    CTIME = "ctime"           # Change time (creation time on Windows)
    MTIME = "mtime"           # Modification time
    BIRTHTIME = "birthtime"   # Creation time (falls back to ctime where unsupported)

    @property
    def is_filesystem(self) -> bool:
        return self is not TimestampSource.EXIF


@dataclass
class FileRecord:
    """File being renamed"""
    name: str                                   # Relative to the target directory, POSIX separators
    timestamp_source: TimestampSource = TimestampSource.EXIF
    timestamp: Optional[datetime] = None
    resolution_error: Optional[ResolutionError] = None
    temporary_name: Optional[str] = None
    final_name: Optional[str] = None

    @property
    def ok(self) -> bool:
        """Whether the timestamp was resolved"""
        return self.timestamp is not None and self.resolution_error is None

    @property
    def suffix(self) -> str:
        """Extension from the last dot of the file name ('.jpg' keeps '.jpg')"""
        base = PurePosixPath(self.name).name
        dot = base.rfind(".")
        return base[dot:] if dot >= 0 else ""

    @property
    def parent(self) -> str:
        """Sub-directory part of the name ("" for top-level files)"""
        parent = str(PurePosixPath(self.name).parent)
        return "" if parent == "." else parent

    def path_in(self, directory: Path) -> Path:
        return Path(directory) / self.name


@dataclass
class RenameOp:
    """Single rename operation, names relative to the plan directory"""
    original: str
    temporary: str
    final: str
    note: str = ""                  # Note (e.g., timestamp collision explanation)

    @property
    def is_same(self) -> bool:
        """Whether the file already has its final name"""
        return self.original == self.final


@dataclass
class RenameOptions:
    """Run configuration"""
    directory: Path = field(default_factory=Path.cwd)
    pattern: str = "*.jpg"          # Glob, always case-insensitive
    timestamp_source: TimestampSource = TimestampSource.EXIF
    ignore_errors: bool = False     # Skip files that fail instead of aborting

    # Concurrency limits
    read_limit: int = 5             # Concurrent metadata reads
    rename_limit: int = 30          # Concurrent renames

    # Execution options
    dry_run: bool = False           # Preview only, do not actually execute


@dataclass
class RenamePlan:
    """Batch rename plan"""
    directory: Path
    ops: List[RenameOp] = field(default_factory=list)

    @property
    def conflict_count(self) -> int:
        """Number of files that received a numeric suffix"""
        return sum(1 for op in self.ops if op.note)

    @property
    def total_count(self) -> int:
        """Total number of operations"""
        return len(self.ops)

    def add_op(self, original: str, temporary: str, final: str, note: str = "") -> RenameOp:
        """Add operation"""
        op = RenameOp(original=original, temporary=temporary, final=final, note=note)
        self.ops.append(op)
        return op

    def summary(self) -> str:
        """Generate summary"""
        lines = [
            f"Rename Plan Summary:",
            f"  - Directory: {self.directory}",
            f"  - Total operations: {self.total_count}",
            f"  - Same-second collisions: {self.conflict_count}",
        ]
        return "\n".join(lines)
