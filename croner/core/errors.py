"""
errors.py - Error Types

Every failure the pipeline reports is one of these.
"""

from typing import List, Sequence


class CronerError(Exception):
    """Base error for the project."""


class InputError(CronerError):
    """Invalid configuration (bad directory, bad pattern, bad limits)."""


class NoMatchError(CronerError):
    """Selection or post-resolution filtering left no files."""


class FileSystemError(CronerError, OSError):
    """Directory listing or stat failure. Never recovered locally."""


class PlanError(CronerError):
    """A rename plan failed validation."""


class ResolutionError(CronerError):
    """Timestamp resolution failed for one file."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason


class RenameError(CronerError):
    """A single rename failed."""

    def __init__(self, src: str, dst: str, phase: int, reason: str):
        super().__init__(f"Phase {phase} failed: {src} -> {dst}: {reason}")
        self.src = src
        self.dst = dst
        self.phase = phase
        self.reason = reason


class StageError(CronerError):
    """Aggregate failure of one pipeline stage."""

    def __init__(self, stage: str, failures: Sequence[CronerError]):
        self.stage = stage
        self.failures: List[CronerError] = list(failures)
        super().__init__(f"Failed {stage} for {len(self.failures)} file(s)")

    @property
    def failure_count(self) -> int:
        return len(self.failures)
