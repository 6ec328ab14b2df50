"""Editing session for the report open in the editor."""

from __future__ import annotations

import logging
from datetime import datetime
from threading import Lock
from typing import Any, Callable, List, Mapping, Optional

from .autosave import DEFAULT_DELAY_SECONDS, AutosaveController, SaveStatus
from .dispatch import Clipboard, DispatchFlow, DispatchOutcome, MailComposer
from .importer import TaskImportBridge
from .models import DEFAULT_THEME_COLOR, PlanningEntry, ReportAggregate, TaskRecord, User
from .parsing import ParseOutcome, TaskParser, parse_task
from .planning import add_entry, edit_entry, remove_entry
from .renderer import ReportRenderer
from .scheduling import Scheduler
from .session import SessionContext
from .storage import ReportStorage
from . import tasks, theme
from .time_engine import format_clock

logger = logging.getLogger(__name__)

PRE_TEXT_TEMPLATE = "Hi Team,\n\nPlease find my work report for {date}:"
POST_TEXT_TEMPLATE = "Best Regards,\n{name}\nEmp ID: {employee_id}"


def apply_defaults(report: ReportAggregate, user: User) -> None:
    """Fill empty greeting/signature texts and a missing theme color."""
    if not report.pre_text:
        report.pre_text = PRE_TEXT_TEMPLATE.format(date=report.date)
    if not report.post_text:
        report.post_text = POST_TEXT_TEMPLATE.format(name=user.name, employee_id=user.employee_id)
    if not report.theme_color:
        report.theme_color = DEFAULT_THEME_COLOR


class ReportEditor:
    """Mutates the open aggregate and schedules its autosave.

    All edits happen in memory first; persistence follows after the autosave
    quiet period and may fail without losing the edits.
    """

    def __init__(
        self,
        session: SessionContext,
        storage: ReportStorage,
        report: ReportAggregate,
        *,
        clipboard: Clipboard,
        composer: MailComposer,
        renderer: Optional[ReportRenderer] = None,
        parser: Optional[TaskParser] = None,
        scheduler: Optional[Scheduler] = None,
        autosave_delay: float = DEFAULT_DELAY_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
        on_save_status: Optional[Callable[[SaveStatus], None]] = None,
    ) -> None:
        self.session = session
        self.storage = storage
        self.report = report
        self.parser = parser
        self.clock = clock
        self.renderer = renderer or ReportRenderer()
        apply_defaults(report, session.require_user())
        self.autosave = AutosaveController(
            storage, report, scheduler=scheduler, delay_seconds=autosave_delay, on_status=on_save_status
        )
        self.flow = DispatchFlow(self.renderer, clipboard, composer)
        self.importer = TaskImportBridge(storage, report)
        self._parse_lock = Lock()
        self._parsing = False
        # defaults filled in above still need to reach storage
        self._changed()

    @property
    def user(self) -> User:
        return self.session.require_user()

    @property
    def is_parsing(self) -> bool:
        return self._parsing

    def now(self) -> str:
        return format_clock(self.clock())

    def _changed(self) -> None:
        self.autosave.notify_changed()

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------
    def start_task(self, seed: Optional[Mapping[str, Any]] = None) -> TaskRecord:
        task = tasks.start_task(self.report, self.user, self.now(), seed)
        self._changed()
        return task

    def stop_task(self, task_id: str) -> Optional[TaskRecord]:
        current = self.report.find_task(task_id)
        was_running = current is not None and current.is_running
        task = tasks.stop_task(self.report, task_id, self.now())
        if was_running:
            self._changed()
        return task

    def edit_task(self, task_id: str, field: str, value: Any) -> Optional[TaskRecord]:
        task = tasks.edit_field(self.report, task_id, field, value)
        if task is not None:
            self._changed()
        return task

    def remove_task(self, task_id: str) -> bool:
        removed = tasks.remove_task(self.report, task_id)
        if removed:
            self._changed()
        return removed

    def restart_task(self, task_id: str) -> Optional[TaskRecord]:
        task = tasks.restart_task(self.report, self.user, task_id, self.now())
        if task is not None:
            self._changed()
        return task

    def recent_projects(self) -> List[str]:
        return tasks.recent_projects(self.report)

    def continue_project(self, project_name: str) -> Optional[TaskRecord]:
        task = tasks.continue_project(self.report, self.user, project_name, self.now())
        if task is not None:
            self._changed()
        return task

    def begin_parse(self, text: str) -> Optional[ParseOutcome]:
        """Parse ``text`` without touching the report; safe off the UI thread.

        Returns ``None`` for blank input or while another parse is running.
        """
        text = text.strip()
        if not text:
            return None
        with self._parse_lock:
            if self._parsing:
                return None
            self._parsing = True
        try:
            return parse_task(self.parser, text)
        finally:
            with self._parse_lock:
                self._parsing = False

    def apply_parsed(self, outcome: ParseOutcome) -> TaskRecord:
        if outcome.used_fallback:
            logger.info("Started task from fallback parse: %s", outcome.notice)
        return self.start_task(outcome.fields)

    def start_task_from_text(self, text: str) -> Optional[ParseOutcome]:
        outcome = self.begin_parse(text)
        if outcome is None:
            return None
        self.apply_parsed(outcome)
        return outcome

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------
    def add_planning_entry(self) -> PlanningEntry:
        entry = add_entry(self.report)
        self._changed()
        return entry

    def edit_planning_entry(self, entry_id: str, field: str, value: str) -> Optional[PlanningEntry]:
        entry = edit_entry(self.report, entry_id, field, value)
        if entry is not None:
            self._changed()
        return entry

    def remove_planning_entry(self, entry_id: str) -> bool:
        removed = remove_entry(self.report, entry_id)
        if removed:
            self._changed()
        return removed

    # ------------------------------------------------------------------
    # Texts and theme
    # ------------------------------------------------------------------
    def set_pre_text(self, text: str) -> None:
        self.report.pre_text = text
        self._changed()

    def set_post_text(self, text: str) -> None:
        self.report.post_text = text
        self._changed()

    def select_color(self, color: str) -> None:
        theme.select_color(self.report, color)
        self._changed()

    def save_current_color(self) -> theme.ColorSaveResult:
        user = self.user
        result = theme.save_color(user, self.report.theme_color)
        if result is theme.ColorSaveResult.SAVED:
            self.session.update_user(user)
        return result

    def remove_saved_color(self, color: str) -> bool:
        user = self.user
        removed = theme.remove_color(user, color)
        if removed:
            self.session.update_user(user)
        return removed

    def toggle_viewer_mode(self) -> str:
        user = self.user
        mode = theme.toggle_viewer_mode(user)
        self.session.update_user(user)
        return mode

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------
    def import_task(self, task_id: str) -> Optional[TaskRecord]:
        task = self.importer.copy_task(task_id)
        if task is not None:
            self._changed()
        return task

    # ------------------------------------------------------------------
    # Review and dispatch
    # ------------------------------------------------------------------
    def preview(self) -> str:
        return self.flow.preview(self.report, self.user)

    def dispatch(self) -> DispatchOutcome:
        return self.flow.dispatch(self.report, self.user)

    def close(self) -> None:
        self.autosave.flush()


__all__ = ["POST_TEXT_TEMPLATE", "PRE_TEXT_TEMPLATE", "ReportEditor", "apply_defaults"]
