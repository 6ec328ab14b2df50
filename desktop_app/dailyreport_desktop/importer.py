"""Copying tasks from earlier reports into the open one."""

from __future__ import annotations

from typing import List, Optional

from .models import ReportAggregate, TaskRecord
from .storage import ReportStorage
from .tasks import import_task


class TaskImportBridge:
    """Browse the user's other reports and copy single tasks out of them.

    There is no import-all: each task is copied on its own and the same task
    can be copied again.
    """

    def __init__(self, storage: ReportStorage, target: ReportAggregate) -> None:
        self.storage = storage
        self.target = target
        self.history: List[ReportAggregate] = []
        self.selected: Optional[ReportAggregate] = None

    def load_history(self) -> List[ReportAggregate]:
        reports = self.storage.list_reports(self.target.user_id)
        self.history = [report for report in reports if not self.target.id or report.id != self.target.id]
        return self.history

    def select(self, report_id: str) -> Optional[ReportAggregate]:
        self.selected = next((report for report in self.history if report.id == report_id), None)
        return self.selected

    def clear_selection(self) -> None:
        self.selected = None

    def candidates(self) -> List[TaskRecord]:
        return list(self.selected.tasks) if self.selected else []

    def copy_task(self, task_id: str) -> Optional[TaskRecord]:
        if self.selected is None:
            return None
        source = self.selected.find_task(task_id)
        if source is None:
            return None
        return import_task(self.target, source)


__all__ = ["TaskImportBridge"]
