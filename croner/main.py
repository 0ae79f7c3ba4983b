#!/usr/bin/env python3
"""
Chronological Renamer - Main Entry

Supports:
- CLI mode (--cli or -c parameter, or any other argument)
- GUI mode (no arguments)

Usage:
    croner                          # GUI mode
    croner --cli                    # CLI mode, current directory, *.jpg
    croner -f ./photos -t mtime     # CLI mode
    python -m croner -c -f ./photos # CLI mode
"""

import sys
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = sys.argv[1:] if argv is None else list(argv)

    # Any argument selects the CLI
    if args:
        args = [arg for arg in args if arg not in ("--cli", "-c")]

        from .cli import main as cli_main
        return cli_main(args)

    # Default to starting GUI
    try:
        from .gui import main as gui_main
    except ImportError as e:
        print(f"Error: Unable to start GUI, please ensure PySide6 is installed")
        print(f"Detailed error: {e}")
        print("\nInstall command: pip install PySide6")
        print("\nTo use CLI mode, run:")
        print("    croner --cli")
        print("or  croner -c")
        return 1
    return gui_main()


if __name__ == "__main__":
    sys.exit(main())
