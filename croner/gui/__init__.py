"""
gui - PySide6 front end for the chronological renamer
"""

from .gui_entry import main

__all__ = ["main"]
