"""
cli - Command Line Interface for the chronological renamer
"""

from .cli_entry import main

__all__ = ["main"]
