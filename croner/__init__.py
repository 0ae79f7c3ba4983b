"""
croner - Chronological image renamer
"""

__version__ = "1.0.0"
