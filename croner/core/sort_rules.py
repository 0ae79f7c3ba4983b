"""
sort_rules.py - Sorting Rules Module

Deterministic ordering of file records
"""

from typing import List

from .models_fs import FileRecord


def sort_by_name(records: List[FileRecord]) -> List[FileRecord]:
    """
    Sort by name (for ensuring stable processing order)

    Args:
        records: Record list

    Returns:
        Sorted record list (new list)
    """
    return sorted(records, key=lambda r: (r.name.casefold(), r.name))
