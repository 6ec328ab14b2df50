"""Sign-in dialog and report dashboard."""

from __future__ import annotations

from datetime import date
from typing import Dict, Optional

from PySide6.QtCore import QDate, Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (QDateEdit, QDialog, QFormLayout, QGroupBox,
                               QHBoxLayout, QLabel, QLineEdit, QListWidget,
                               QListWidgetItem, QMainWindow, QMessageBox,
                               QProgressBar, QPushButton, QTabWidget,
                               QVBoxLayout, QWidget)

from ..dashboard import ReportDashboard
from ..errors import ErrorKind, StorageError
from ..parsing import TaskParser
from ..session import SessionContext
from ..storage import ReportStorage
from .editor_window import ReportEditorWindow


class LoginDialog(QDialog):
    """Email sign-in with a signup tab for new users."""

    def __init__(self, session: SessionContext, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.session = session
        self.setWindowTitle("Daily Report - Sign in")

        self.login_email = QLineEdit()
        login_button = QPushButton("Login")
        login_button.clicked.connect(self._login)
        login_tab = QWidget()
        login_form = QFormLayout(login_tab)
        login_form.addRow("Email", self.login_email)
        login_form.addRow(login_button)

        self.signup_fields: Dict[str, QLineEdit] = {
            "name": QLineEdit(),
            "employeeId": QLineEdit(),
            "teamName": QLineEdit(),
            "email": QLineEdit(),
        }
        signup_button = QPushButton("Create Account")
        signup_button.clicked.connect(self._signup)
        signup_tab = QWidget()
        signup_form = QFormLayout(signup_tab)
        signup_form.addRow("Name", self.signup_fields["name"])
        signup_form.addRow("Employee ID", self.signup_fields["employeeId"])
        signup_form.addRow("Team Name", self.signup_fields["teamName"])
        signup_form.addRow("Email", self.signup_fields["email"])
        signup_form.addRow(signup_button)

        tabs = QTabWidget()
        tabs.addTab(login_tab, "Login")
        tabs.addTab(signup_tab, "Sign up")

        layout = QVBoxLayout(self)
        layout.addWidget(tabs)

    def _login(self) -> None:
        try:
            user = self.session.login(self.login_email.text())
        except StorageError as exc:
            QMessageBox.warning(self, "Login", str(exc))
            return
        if user is None:
            QMessageBox.warning(self, "Login", "No account found for this email. Please sign up.")
            return
        self.accept()

    def _signup(self) -> None:
        profile = {key: field.text() for key, field in self.signup_fields.items()}
        try:
            self.session.signup(profile)
        except StorageError as exc:
            if exc.kind is ErrorKind.CONFLICT:
                QMessageBox.warning(self, "Sign up", "An account with this email already exists.")
            else:
                QMessageBox.warning(self, "Sign up", str(exc))
            return
        self.accept()


class ReportDashboardWindow(QMainWindow):
    """Lists stored reports and opens them in the editor."""

    def __init__(
        self,
        session: SessionContext,
        storage: ReportStorage,
        *,
        max_reports: int,
        parser: Optional[TaskParser] = None,
        autosave_delay: float = 0.5,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.session = session
        self.storage = storage
        self.parser = parser
        self.autosave_delay = autosave_delay
        self.dashboard = ReportDashboard(storage, session, max_reports=max_reports)
        self.editor_window: Optional[ReportEditorWindow] = None
        self.setWindowTitle("Daily Report")
        self.resize(820, 620)

        self.user_label = QLabel("-")
        font = QFont()
        font.setPointSize(14)
        font.setBold(True)
        self.user_label.setFont(font)

        self.usage_bar = QProgressBar()
        self.usage_label = QLabel("")

        self.date_input = QDateEdit(QDate.currentDate())
        self.date_input.setCalendarPopup(True)
        self.date_input.setDisplayFormat("yyyy-MM-dd")
        self.create_button = QPushButton("Create Report")
        self.open_button = QPushButton("Open")
        self.delete_button = QPushButton("Delete")
        self.logout_button = QPushButton("Logout")
        self.reports_list = QListWidget()

        self.to_input = QLineEdit()
        self.cc_input = QLineEdit()
        self.recipients_button = QPushButton("Save Recipients")

        self.create_button.clicked.connect(self._create_report)
        self.open_button.clicked.connect(self._open_selected)
        self.delete_button.clicked.connect(self._delete_selected)
        self.logout_button.clicked.connect(self._logout)
        self.recipients_button.clicked.connect(self._save_recipients)
        self.reports_list.itemDoubleClicked.connect(lambda _item: self._open_selected())

        self._build_ui()

    def _build_ui(self) -> None:
        header = QHBoxLayout()
        header.addWidget(self.user_label, stretch=1)
        header.addWidget(self.logout_button)

        usage = QHBoxLayout()
        usage.addWidget(self.usage_bar, stretch=1)
        usage.addWidget(self.usage_label)

        create_row = QHBoxLayout()
        create_row.addWidget(self.date_input)
        create_row.addWidget(self.create_button)
        create_row.addStretch(1)
        create_row.addWidget(self.open_button)
        create_row.addWidget(self.delete_button)

        recipients = QGroupBox("Email Recipients")
        form = QFormLayout(recipients)
        form.addRow("To", self.to_input)
        form.addRow("CC", self.cc_input)
        form.addRow(self.recipients_button)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.addLayout(header)
        layout.addLayout(usage)
        layout.addLayout(create_row)
        layout.addWidget(self.reports_list, stretch=1)
        layout.addWidget(recipients)
        self.setCentralWidget(central)

    # ------------------------------------------------------------------
    def refresh_all(self) -> None:
        user = self.session.require_user()
        self.user_label.setText(f"{user.name} ({user.employee_id}) - {user.team_name}")
        self.to_input.setText(user.default_to)
        self.cc_input.setText(user.default_cc)
        self.dashboard.refresh()
        self._fill_reports()

    def _fill_reports(self) -> None:
        self.reports_list.clear()
        for report in self.dashboard.reports:
            item = QListWidgetItem(f"{report.date}  {report.day}  ({len(report.tasks)} Tasks Recorded)")
            item.setData(Qt.UserRole, report.id)
            self.reports_list.addItem(item)
        count, limit, percent = self.dashboard.storage_usage()
        self.usage_bar.setValue(int(percent))
        self.usage_label.setText(f"{count} / {limit} reports")

    def _selected_report(self):
        item = self.reports_list.currentItem()
        if item is None:
            return None
        report_id = item.data(Qt.UserRole)
        return next((report for report in self.dashboard.reports if report.id == report_id), None)

    def _create_report(self) -> None:
        selected = self.date_input.date()
        report_date = date(selected.year(), selected.month(), selected.day()).isoformat()
        try:
            report = self.dashboard.create_report(report_date)
        except StorageError as exc:
            QMessageBox.warning(self, "Create Report", str(exc))
            return
        self._fill_reports()
        self._open_report(report)

    def _open_selected(self) -> None:
        report = self._selected_report()
        if report is not None:
            self._open_report(report)

    def _open_report(self, report) -> None:
        if self.editor_window is not None:
            self.editor_window.close()
        self.editor_window = ReportEditorWindow(
            self.session,
            self.storage,
            report,
            parser=self.parser,
            autosave_delay=self.autosave_delay,
            on_closed=self._editor_closed,
        )
        self.editor_window.show()

    def _editor_closed(self) -> None:
        self.editor_window = None
        try:
            self.refresh_all()
        except StorageError as exc:
            QMessageBox.warning(self, "Reports", str(exc))

    def _delete_selected(self) -> None:
        report = self._selected_report()
        if report is None:
            return
        answer = QMessageBox.question(self, "Delete Report", f"Delete the report of {report.date}?")
        if answer != QMessageBox.Yes:
            return
        try:
            self.dashboard.delete_report(report.id)
        except StorageError as exc:
            QMessageBox.warning(self, "Delete Report", str(exc))
        self._fill_reports()

    def _save_recipients(self) -> None:
        try:
            self.dashboard.update_recipients(self.to_input.text(), self.cc_input.text())
        except StorageError as exc:
            QMessageBox.warning(self, "Recipients", str(exc))
            return
        self.statusBar().showMessage("Recipients saved", 4000)

    def _logout(self) -> None:
        if self.editor_window is not None:
            self.editor_window.close()
        self.session.logout()
        self.close()


__all__ = ["LoginDialog", "ReportDashboardWindow"]
