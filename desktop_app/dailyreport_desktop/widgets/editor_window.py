"""Editor window for a single daily report."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from PySide6.QtCore import QObject, Qt, Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (QColorDialog, QComboBox, QDialog, QFormLayout,
                               QGroupBox, QHBoxLayout, QLabel, QLineEdit,
                               QListWidget, QListWidgetItem, QMainWindow,
                               QMenu, QMessageBox, QPlainTextEdit, QPushButton,
                               QSplitter, QTableWidget, QTableWidgetItem,
                               QTextBrowser, QVBoxLayout, QWidget)

from ..autosave import SaveStatus
from ..dispatch import DispatchState
from ..editor import ReportEditor
from ..errors import StorageError
from ..models import ReportAggregate
from ..parsing import ParseOutcome, TaskParser
from ..renderer import COLUMNS
from ..session import SessionContext
from ..storage import ReportStorage
from ..theme import DEFAULT_COLOR_SUGGESTIONS, ColorSaveResult
from .qt_support import QtClipboard, QtMailComposer, QtScheduler

SAVE_STATUS_TEXT = {
    SaveStatus.IDLE: "",
    SaveStatus.PENDING: "Syncing...",
    SaveStatus.SAVING: "Syncing...",
    SaveStatus.SAVED: "Cloud Synced",
    SaveStatus.NOT_SAVED: "Not saved",
}

READONLY_ATTRIBUTES = {"working_hours"}


class _ParseRelay(QObject):
    finished = Signal(object)


class PreviewDialog(QDialog):
    """Shows the rendered report and hands it to the mail client."""

    def __init__(self, editor: ReportEditor, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.editor = editor
        self.setWindowTitle("Report Preview")
        self.resize(1100, 700)

        self.browser = QTextBrowser()
        self.browser.setHtml(editor.preview())

        dispatch_button = QPushButton("Copy && Open Outlook")
        back_button = QPushButton("Back to Editor")
        dispatch_button.clicked.connect(self._dispatch)
        back_button.clicked.connect(self.reject)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        buttons.addWidget(back_button)
        buttons.addWidget(dispatch_button)

        layout = QVBoxLayout(self)
        layout.addWidget(self.browser)
        layout.addLayout(buttons)

    def _dispatch(self) -> None:
        outcome = self.editor.dispatch()
        if not outcome.dispatched:
            QMessageBox.warning(self, "Dispatch", outcome.notice)
            return
        QMessageBox.information(self, "Dispatch Successful", outcome.notice)
        self.editor.flow.finish()
        self.accept()

    def reject(self) -> None:  # type: ignore[override]
        if self.editor.flow.state is DispatchState.PREVIEWING:
            self.editor.flow.back_to_editing()
        super().reject()


class ImportDialog(QDialog):
    """Pick an earlier report, then copy single tasks from it."""

    def __init__(self, editor: ReportEditor, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.editor = editor
        self.bridge = editor.importer
        self.setWindowTitle("Import Previous Reports")
        self.resize(640, 480)

        self.reports_list = QListWidget()
        self.tasks_list = QListWidget()
        self.copy_button = QPushButton("Import Selected Task")

        self.reports_list.currentItemChanged.connect(self._select_report)
        self.copy_button.clicked.connect(self._copy_task)

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Reports"))
        layout.addWidget(self.reports_list)
        layout.addWidget(QLabel("Tasks"))
        layout.addWidget(self.tasks_list)
        layout.addWidget(self.copy_button)

        try:
            history = self.bridge.load_history()
        except StorageError as exc:
            QMessageBox.warning(self, "Import", str(exc))
            history = []
        if not history:
            self.reports_list.addItem("No history available")
        for report in history:
            item = QListWidgetItem(f"{report.date}  ({len(report.tasks)} Tasks Recorded)")
            item.setData(Qt.UserRole, report.id)
            self.reports_list.addItem(item)

    def _select_report(self, current: Optional[QListWidgetItem], _previous=None) -> None:
        self.tasks_list.clear()
        if current is None or current.data(Qt.UserRole) is None:
            self.bridge.clear_selection()
            return
        self.bridge.select(current.data(Qt.UserRole))
        for task in self.bridge.candidates():
            item = QListWidgetItem(f"{task.project_name}  -  {task.project_type}  -  {task.working_hours} hrs")
            item.setData(Qt.UserRole, task.id)
            self.tasks_list.addItem(item)

    def _copy_task(self) -> None:
        item = self.tasks_list.currentItem()
        if item is None:
            return
        if self.editor.import_task(item.data(Qt.UserRole)) is not None:
            self.copy_button.setText(f"Imported: {item.text()}")


class ReportEditorWindow(QMainWindow):
    """Task table, planning rows, texts and theme of one report."""

    def __init__(
        self,
        session: SessionContext,
        storage: ReportStorage,
        report: ReportAggregate,
        *,
        parser: Optional[TaskParser] = None,
        autosave_delay: float = 0.5,
        on_closed: Optional[Callable[[], None]] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.on_closed = on_closed
        self.status_label = QLabel("")
        self.editor = ReportEditor(
            session,
            storage,
            report,
            clipboard=QtClipboard(),
            composer=QtMailComposer(),
            parser=parser,
            scheduler=QtScheduler(self),
            autosave_delay=autosave_delay,
            on_save_status=self._show_save_status,
        )
        self._updating = False
        self._parse_relay = _ParseRelay()
        self._parse_relay.finished.connect(self._parse_finished)

        self.setWindowTitle(f"{report.date} - {report.day}")
        self.resize(1400, 860)

        self.task_input = QLineEdit()
        self.task_input.setPlaceholderText(
            "Briefly describe your task (e.g. Spent 2 hours on UI design for payment module)"
        )
        self.parse_button = QPushButton("Parse")
        self.task_input.returnPressed.connect(self._parse_input)
        self.parse_button.clicked.connect(self._parse_input)

        self.new_task_button = QPushButton("New Task (Manual)")
        self.plan_button = QPushButton("Add Next Day Plan")
        self.recent_button = QPushButton("Recent Projects")
        self.stop_button = QPushButton("Stop")
        self.restart_button = QPushButton("Start Again")
        self.remove_button = QPushButton("Remove")
        self.import_button = QPushButton("Import Tasks")
        self.preview_button = QPushButton("Review & Dispatch")

        self.new_task_button.clicked.connect(self._new_task)
        self.plan_button.clicked.connect(self._add_plan)
        self.recent_button.clicked.connect(self._show_recent_projects)
        self.stop_button.clicked.connect(self._stop_selected)
        self.restart_button.clicked.connect(self._restart_selected)
        self.remove_button.clicked.connect(self._remove_selected)
        self.import_button.clicked.connect(self._open_import)
        self.preview_button.clicked.connect(self._open_preview)

        self.task_table = QTableWidget(0, len(COLUMNS))
        self.task_table.setHorizontalHeaderLabels([column.title for column in COLUMNS])
        self.task_table.setSelectionBehavior(QTableWidget.SelectRows)
        self.task_table.verticalHeader().setVisible(False)
        self.task_table.itemChanged.connect(self._task_item_changed)

        self.plan_table = QTableWidget(0, 2)
        self.plan_table.setHorizontalHeaderLabels(["Label", "Description"])
        self.plan_table.horizontalHeader().setStretchLastSection(True)
        self.plan_table.verticalHeader().setVisible(False)
        self.plan_table.itemChanged.connect(self._plan_item_changed)
        self.remove_plan_button = QPushButton("Remove Plan Row")
        self.remove_plan_button.clicked.connect(self._remove_plan)

        self.pre_text = QPlainTextEdit(report.pre_text)
        self.post_text = QPlainTextEdit(report.post_text)
        self.pre_text.textChanged.connect(lambda: self.editor.set_pre_text(self.pre_text.toPlainText()))
        self.post_text.textChanged.connect(lambda: self.editor.set_post_text(self.post_text.toPlainText()))

        self.color_combo = QComboBox()
        self.save_color_button = QPushButton("Save Color")
        self.custom_color_button = QPushButton("Custom...")
        self.remove_color_button = QPushButton("Remove Saved")
        self.mode_button = QPushButton("Toggle Dark Mode")
        self.color_combo.activated.connect(self._pick_color)
        self.save_color_button.clicked.connect(self._save_color)
        self.custom_color_button.clicked.connect(self._custom_color)
        self.remove_color_button.clicked.connect(self._remove_color)
        self.mode_button.clicked.connect(self._toggle_mode)

        self._build_ui()
        self._fill_colors()
        self.refresh_tables()

    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        input_row = QHBoxLayout()
        input_row.addWidget(self.task_input, stretch=1)
        input_row.addWidget(self.parse_button)

        action_row = QHBoxLayout()
        for button in (self.new_task_button, self.plan_button, self.recent_button, self.stop_button,
                       self.restart_button, self.remove_button, self.import_button):
            action_row.addWidget(button)
        action_row.addStretch(1)
        action_row.addWidget(self.status_label)
        action_row.addWidget(self.preview_button)

        plan_box = QGroupBox("Next Working Day")
        plan_layout = QVBoxLayout(plan_box)
        plan_layout.addWidget(self.plan_table)
        plan_layout.addWidget(self.remove_plan_button)

        text_box = QGroupBox("Email Texts")
        text_form = QFormLayout(text_box)
        text_form.addRow("Before table", self.pre_text)
        text_form.addRow("After table", self.post_text)

        theme_box = QGroupBox("Theme")
        theme_layout = QHBoxLayout(theme_box)
        theme_layout.addWidget(self.color_combo, stretch=1)
        theme_layout.addWidget(self.custom_color_button)
        theme_layout.addWidget(self.save_color_button)
        theme_layout.addWidget(self.remove_color_button)
        theme_layout.addWidget(self.mode_button)

        lower = QSplitter()
        lower.addWidget(plan_box)
        side = QWidget()
        side_layout = QVBoxLayout(side)
        side_layout.addWidget(text_box)
        side_layout.addWidget(theme_box)
        lower.addWidget(side)

        splitter = QSplitter()
        splitter.setOrientation(Qt.Vertical)
        splitter.addWidget(self.task_table)
        splitter.addWidget(lower)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.addLayout(input_row)
        layout.addLayout(action_row)
        layout.addWidget(splitter)
        self.setCentralWidget(central)

    def _fill_colors(self) -> None:
        self.color_combo.clear()
        for name, color in DEFAULT_COLOR_SUGGESTIONS:
            self.color_combo.addItem(name, color)
        for color in self.editor.user.saved_colors:
            self.color_combo.addItem(f"Saved {color}", color)
        index = self.color_combo.findData(self.editor.report.theme_color)
        if index >= 0:
            self.color_combo.setCurrentIndex(index)

    # ------------------------------------------------------------------
    def refresh_tables(self) -> None:
        self._updating = True
        try:
            report = self.editor.report
            self.task_table.setRowCount(len(report.tasks))
            for row, task in enumerate(report.tasks):
                for column_index, column in enumerate(COLUMNS):
                    item = QTableWidgetItem(str(getattr(task, column.attribute)))
                    item.setData(Qt.UserRole, task.id)
                    if column.attribute in READONLY_ATTRIBUTES:
                        item.setFlags(Qt.ItemIsSelectable | Qt.ItemIsEnabled)
                    if column.align == "center":
                        item.setTextAlignment(Qt.AlignCenter)
                    if task.is_running:
                        item.setBackground(QColor("#eef2ff"))
                    self.task_table.setItem(row, column_index, item)
            self.task_table.resizeColumnsToContents()

            self.plan_table.setRowCount(len(report.planning_tasks))
            for row, entry in enumerate(report.planning_tasks):
                for column_index, value in enumerate((entry.label, entry.description)):
                    item = QTableWidgetItem(value)
                    item.setData(Qt.UserRole, entry.id)
                    self.plan_table.setItem(row, column_index, item)
        finally:
            self._updating = False

    def _selected_task_id(self) -> Optional[str]:
        item = self.task_table.currentItem()
        return item.data(Qt.UserRole) if item else None

    def _task_item_changed(self, item: QTableWidgetItem) -> None:
        if self._updating:
            return
        attribute = COLUMNS[item.column()].attribute
        if attribute in READONLY_ATTRIBUTES:
            return
        self.editor.edit_task(item.data(Qt.UserRole), attribute, item.text())
        self.refresh_tables()

    def _plan_item_changed(self, item: QTableWidgetItem) -> None:
        if self._updating:
            return
        field = "label" if item.column() == 0 else "description"
        self.editor.edit_planning_entry(item.data(Qt.UserRole), field, item.text())

    # ------------------------------------------------------------------
    def _new_task(self) -> None:
        self.editor.start_task()
        self.refresh_tables()

    def _parse_input(self) -> None:
        text = self.task_input.text()
        if not text.strip() or self.editor.is_parsing:
            return
        self.parse_button.setEnabled(False)
        self.task_input.setEnabled(False)
        self.parse_button.setText("Parsing...")

        def work() -> None:
            self._parse_relay.finished.emit(self.editor.begin_parse(text))

        threading.Thread(target=work, daemon=True).start()

    def _parse_finished(self, outcome: Optional[ParseOutcome]) -> None:
        self.parse_button.setEnabled(True)
        self.task_input.setEnabled(True)
        self.parse_button.setText("Parse")
        if outcome is None:
            return
        self.editor.apply_parsed(outcome)
        self.task_input.clear()
        self.refresh_tables()
        self.statusBar().showMessage(outcome.notice, 4000)

    def _show_recent_projects(self) -> None:
        menu = QMenu(self)
        projects = self.editor.recent_projects()
        if not projects:
            menu.addAction("No recent projects").setEnabled(False)
        for name in projects:
            menu.addAction(name, lambda checked=False, project=name: self._continue(project))
        menu.exec(self.recent_button.mapToGlobal(self.recent_button.rect().bottomLeft()))

    def _continue(self, project: str) -> None:
        self.editor.continue_project(project)
        self.refresh_tables()

    def _stop_selected(self) -> None:
        task_id = self._selected_task_id()
        if task_id:
            self.editor.stop_task(task_id)
            self.refresh_tables()
            self.statusBar().showMessage("Task Stopped", 4000)

    def _restart_selected(self) -> None:
        task_id = self._selected_task_id()
        if task_id and self.editor.restart_task(task_id) is not None:
            self.refresh_tables()

    def _remove_selected(self) -> None:
        task_id = self._selected_task_id()
        if task_id and self.editor.remove_task(task_id):
            self.refresh_tables()

    def _add_plan(self) -> None:
        self.editor.add_planning_entry()
        self.refresh_tables()
        self.statusBar().showMessage("Next Working Day row added", 4000)

    def _remove_plan(self) -> None:
        item = self.plan_table.currentItem()
        if item and self.editor.remove_planning_entry(item.data(Qt.UserRole)):
            self.refresh_tables()

    # ------------------------------------------------------------------
    def _pick_color(self, index: int) -> None:
        self.editor.select_color(self.color_combo.itemData(index))

    def _custom_color(self) -> None:
        color = QColorDialog.getColor(QColor(self.editor.report.theme_color), self)
        if color.isValid():
            self.editor.select_color(color.name())
            self.color_combo.addItem(color.name(), color.name())
            self.color_combo.setCurrentIndex(self.color_combo.count() - 1)

    def _save_color(self) -> None:
        try:
            result = self.editor.save_current_color()
        except StorageError as exc:
            QMessageBox.warning(self, "Theme", str(exc))
            return
        if result is ColorSaveResult.DUPLICATE:
            self.statusBar().showMessage("Color already in library", 4000)
        elif result is ColorSaveResult.SAVED:
            self.statusBar().showMessage("Color saved to your account", 4000)
            self._fill_colors()

    def _remove_color(self) -> None:
        color = self.color_combo.currentData()
        try:
            removed = self.editor.remove_saved_color(color)
        except StorageError as exc:
            QMessageBox.warning(self, "Theme", str(exc))
            return
        if removed:
            self.statusBar().showMessage("Color removed", 4000)
            self._fill_colors()

    def _toggle_mode(self) -> None:
        try:
            self.editor.toggle_viewer_mode()
        except StorageError as exc:
            QMessageBox.warning(self, "Theme", str(exc))

    # ------------------------------------------------------------------
    def _open_import(self) -> None:
        ImportDialog(self.editor, self).exec()
        self.refresh_tables()

    def _open_preview(self) -> None:
        PreviewDialog(self.editor, self).exec()

    def _show_save_status(self, status: SaveStatus) -> None:
        text = SAVE_STATUS_TEXT[status]
        if status is SaveStatus.NOT_SAVED and self.editor.autosave.last_error is not None:
            text = f"Not saved: {self.editor.autosave.last_error}"
        self.status_label.setText(text)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.editor.close()
        if self.on_closed is not None:
            self.on_closed()
        super().closeEvent(event)


__all__ = ["ImportDialog", "PreviewDialog", "ReportEditorWindow"]
