"""
gui_mainwindow.py - GUI Main Window

Pick a folder, preview the chronological names, execute the rename.
"""

from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QLineEdit, QPushButton, QCheckBox, QComboBox,
    QTableWidget, QTableWidgetItem, QProgressBar,
    QFileDialog, QMessageBox, QHeaderView, QGroupBox
)
from PySide6.QtCore import Slot
from PySide6.QtGui import QColor

from ..core import RenameOptions, RenamePlan, RenameResult, TimestampSource
from .gui_workers import PlanWorker, RenameWorker

TIMESTAMP_LABELS = {
    TimestampSource.EXIF: "EXIF capture time",
    TimestampSource.MTIME: "Modification time",
    TimestampSource.CTIME: "Change time",
    TimestampSource.ATIME: "Access time",
    TimestampSource.BIRTHTIME: "Creation time",
}


class ChronoRenameWidget(QWidget):
    """Chronological rename panel"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.plan: Optional[RenamePlan] = None
        self.options: Optional[RenameOptions] = None
        self.plan_worker: Optional[PlanWorker] = None
        self.rename_worker: Optional[RenameWorker] = None

        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        # Settings group
        settings_group = QGroupBox("Settings")
        settings_layout = QGridLayout(settings_group)

        # Directory selection
        settings_layout.addWidget(QLabel("Directory:"), 0, 0)
        self.dir_edit = QLineEdit()
        self.dir_edit.setPlaceholderText("Select photo directory...")
        settings_layout.addWidget(self.dir_edit, 0, 1)
        self.browse_btn = QPushButton("Browse...")
        self.browse_btn.clicked.connect(self._browse_directory)
        settings_layout.addWidget(self.browse_btn, 0, 2)

        # Pattern
        settings_layout.addWidget(QLabel("Pattern:"), 1, 0)
        self.pattern_edit = QLineEdit("*.jpg")
        self.pattern_edit.setPlaceholderText("Glob pattern, case-insensitive")
        settings_layout.addWidget(self.pattern_edit, 1, 1, 1, 2)

        # Timestamp source
        settings_layout.addWidget(QLabel("Order By:"), 2, 0)
        self.source_combo = QComboBox()
        for source, label in TIMESTAMP_LABELS.items():
            self.source_combo.addItem(label, source)
        settings_layout.addWidget(self.source_combo, 2, 1, 1, 2)

        self.ignore_check = QCheckBox("Skip files with errors")
        settings_layout.addWidget(self.ignore_check, 3, 0, 1, 3)

        # Preview button
        self.preview_btn = QPushButton("Preview")
        self.preview_btn.clicked.connect(self._do_preview)
        settings_layout.addWidget(self.preview_btn, 4, 0, 1, 3)

        layout.addWidget(settings_group)

        # Results table
        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Original Name", "New Name", "Status"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        layout.addWidget(self.table, 1)

        # Progress and execution
        bottom_layout = QHBoxLayout()

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        bottom_layout.addWidget(self.progress_bar, 1)

        self.execute_btn = QPushButton("Execute Rename")
        self.execute_btn.clicked.connect(self._do_execute)
        self.execute_btn.setEnabled(False)
        self.execute_btn.setStyleSheet("QPushButton { background-color: #4CAF50; color: white; font-weight: bold; padding: 8px 16px; }")
        bottom_layout.addWidget(self.execute_btn)

        layout.addLayout(bottom_layout)

        # Status label
        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

    def _browse_directory(self):
        """Browse and select directory"""
        directory = QFileDialog.getExistingDirectory(self, "Select Directory")
        if directory:
            self.dir_edit.setText(directory)

    def _current_options(self) -> RenameOptions:
        return RenameOptions(
            directory=Path(self.dir_edit.text().strip()),
            pattern=self.pattern_edit.text().strip(),
            timestamp_source=self.source_combo.currentData(),
            ignore_errors=self.ignore_check.isChecked(),
        )

    def _do_preview(self):
        """Generate preview"""
        if not self.dir_edit.text().strip():
            QMessageBox.warning(self, "Warning", "Please select a directory first")
            return

        self.options = self._current_options()
        self.preview_btn.setEnabled(False)
        self.preview_btn.setText("Reading timestamps...")
        self.execute_btn.setEnabled(False)
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, 0)  # Indeterminate progress

        # Start plan generation thread
        self.plan_worker = PlanWorker(self.options)
        self.plan_worker.finished.connect(self._on_plan_finished)
        self.plan_worker.error.connect(self._on_plan_error)
        self.plan_worker.start()

    @Slot(object)
    def _on_plan_finished(self, plan: RenamePlan):
        """Plan generation complete"""
        self.plan = plan
        self.preview_btn.setEnabled(True)
        self.preview_btn.setText("Preview")
        self.progress_bar.setVisible(False)

        self._update_table_preview()

        if plan.ops:
            self.execute_btn.setEnabled(True)
            self.status_label.setText(
                f"Will perform {plan.total_count} rename operations (same-second collisions: {plan.conflict_count})")
        else:
            self.status_label.setText("No files need renaming")

    @Slot(str)
    def _on_plan_error(self, error: str):
        """Plan generation error"""
        self.plan = None
        self.table.setRowCount(0)
        self.preview_btn.setEnabled(True)
        self.preview_btn.setText("Preview")
        self.progress_bar.setVisible(False)
        QMessageBox.critical(self, "Error", f"Failed to generate preview: {error}")

    def _update_table_preview(self):
        """Update table to display preview results"""
        if not self.plan:
            return

        self.table.setRowCount(len(self.plan.ops))
        for i, op in enumerate(self.plan.ops):
            self.table.setItem(i, 0, QTableWidgetItem(op.original))
            new_name_item = QTableWidgetItem(op.final)
            if op.note:
                # Same-second collision
                new_name_item.setBackground(QColor(255, 255, 200))
                status_item = QTableWidgetItem("Same Second")
                status_item.setForeground(QColor(200, 150, 0))
            elif op.is_same:
                status_item = QTableWidgetItem("No Change")
                status_item.setForeground(QColor(150, 150, 150))
            else:
                status_item = QTableWidgetItem("Will Rename")
                status_item.setForeground(QColor(0, 150, 0))
            self.table.setItem(i, 1, new_name_item)
            self.table.setItem(i, 2, status_item)

        self.table.sortItems(1)

    def _do_execute(self):
        """Execute rename"""
        if not self.plan or not self.plan.ops:
            return

        # Confirm
        reply = QMessageBox.question(
            self, "Confirm",
            f"Are you sure you want to execute {self.plan.total_count} rename operations?\n\nThis action cannot be undone!",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        if reply != QMessageBox.StandardButton.Yes:
            return

        self.execute_btn.setEnabled(False)
        self.execute_btn.setText("Executing...")
        self.preview_btn.setEnabled(False)
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, self.plan.total_count * 2)

        # Start execution thread
        self.rename_worker = RenameWorker(self.plan, self.options)
        self.rename_worker.progress.connect(self._on_rename_progress)
        self.rename_worker.finished.connect(self._on_rename_finished)
        self.rename_worker.error.connect(self._on_rename_error)
        self.rename_worker.start()

    @Slot(int, int, str)
    def _on_rename_progress(self, current: int, total: int, msg: str):
        """Execution progress update"""
        self.progress_bar.setValue(current)
        self.status_label.setText(msg)

    @Slot(object)
    def _on_rename_finished(self, result: RenameResult):
        """Execution complete"""
        self.execute_btn.setText("Execute Rename")
        self.preview_btn.setEnabled(True)
        self.progress_bar.setVisible(False)

        # Display results
        msg = f"Rename complete!\n\nSuccess: {result.success_count}\nFailed: {result.failed_count}"
        if result.failed_count > 0:
            msg += "\n\nFailure Details:\n"
            for op, error in result.failed[:5]:
                msg += f"  {op.original}: {error}\n"
            if len(result.failed) > 5:
                msg += f"  ... and {len(result.failed) - 5} more failures"

        QMessageBox.information(self, "Complete", msg)

        # Clear state
        self.plan = None
        self.table.setRowCount(0)
        self.status_label.setText("Complete")

    @Slot(str)
    def _on_rename_error(self, error: str):
        """Execution error; the directory may be partially renamed"""
        self.execute_btn.setText("Execute Rename")
        self.preview_btn.setEnabled(True)
        self.progress_bar.setVisible(False)
        self.plan = None
        self.table.setRowCount(0)
        QMessageBox.critical(
            self, "Error",
            f"Execution failed: {error}\n\nSome files may keep a temporary name, see the log for details.")


class MainWindow(QMainWindow):
    """Main window"""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Chronological Renamer")
        self.setMinimumSize(800, 600)

        self.panel = ChronoRenameWidget()
        self.setCentralWidget(self.panel)

        # Status bar
        self.statusBar().showMessage("Ready")
