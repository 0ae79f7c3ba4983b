"""
gui_workers.py - GUI Worker Threads

Provides background execution of long tasks to avoid blocking UI
"""

import logging
from typing import Optional

from PySide6.QtCore import QThread, Signal, QObject

from ..core import RenameOptions, RenamePlan, execute_rename, prepare_plan

_log = logging.getLogger(__name__)


class PlanWorker(QThread):
    """Select, resolve and plan in the background"""

    # Signals
    finished = Signal(object)           # RenamePlan
    error = Signal(str)                 # Error message

    def __init__(self, options: RenameOptions, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.options = options

    def run(self):
        try:
            plan = prepare_plan(self.options, _log)
            self.finished.emit(plan)
        except Exception as e:
            _log.exception("Failed to generate rename plan")
            self.error.emit(str(e))


class RenameWorker(QThread):
    """Rename execution worker thread"""

    # Signals
    progress = Signal(int, int, str)    # current, total, message
    finished = Signal(object)           # RenameResult
    error = Signal(str)                 # Error message

    def __init__(
        self,
        plan: RenamePlan,
        options: RenameOptions,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.plan = plan
        self.options = options

    def run(self):
        try:
            def progress_callback(current: int, total: int, msg: str):
                self.progress.emit(current, total, msg)

            result = execute_rename(
                self.plan,
                ignore_errors=self.options.ignore_errors,
                rename_limit=self.options.rename_limit,
                progress_callback=progress_callback,
                logger=_log,
            )

            self.finished.emit(result)
        except Exception as e:
            _log.exception("Rename failed")
            self.error.emit(str(e))
