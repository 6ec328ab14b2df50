"""Task lifecycle on a report aggregate.

At most one task of an aggregate is running at any time: starting a task first
stops every running one at the same instant. ``working_hours`` is always
derived from the start/end pair and never edited directly.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional

from .models import ReportAggregate, TaskRecord, User, new_id
from .time_engine import ZERO_HOURS, elapsed

DEFAULT_PROJECT_NAME = "New Project"
DEFAULT_PROJECT_TYPE = "General"
DEFAULT_ASSIGNED_BY = "Self"
IMPORTED_CLOCK = "09:00"

EDITABLE_FIELDS = frozenset(
    {
        "date",
        "day",
        "project_name",
        "project_type",
        "assigned_by",
        "employee_name",
        "employee_id",
        "team_name",
        "start_time",
        "end_time",
        "remarks",
    }
)
TIME_FIELDS = frozenset({"start_time", "end_time"})


def _stop(task: TaskRecord, now: str) -> None:
    task.is_running = False
    task.end_time = now
    task.working_hours = elapsed(task.start_time, now)


def start_task(
    report: ReportAggregate,
    user: User,
    now: str,
    seed: Optional[Mapping[str, Any]] = None,
) -> TaskRecord:
    """Stop whatever is running and append a new running task starting at ``now``.

    ``seed`` may provide ``project_name``, ``project_type``, ``assigned_by`` and
    ``remarks``; blank values fall back to the defaults.
    """
    for task in report.running_tasks():
        _stop(task, now)

    seed = seed or {}
    task = TaskRecord(
        id=new_id(),
        date=report.date,
        day=report.day,
        project_name=seed.get("project_name") or DEFAULT_PROJECT_NAME,
        project_type=seed.get("project_type") or DEFAULT_PROJECT_TYPE,
        assigned_by=seed.get("assigned_by") or DEFAULT_ASSIGNED_BY,
        employee_name=user.name,
        employee_id=user.employee_id,
        team_name=user.team_name,
        start_time=now,
        end_time="",
        working_hours=ZERO_HOURS,
        remarks=seed.get("remarks") or "",
        is_running=True,
    )
    report.tasks.append(task)
    return task


def stop_task(report: ReportAggregate, task_id: str, now: str) -> Optional[TaskRecord]:
    """Stop the task if it is running. Unknown ids and stopped tasks are left alone."""
    task = report.find_task(task_id)
    if task is None or not task.is_running:
        return task
    _stop(task, now)
    return task


def edit_field(report: ReportAggregate, task_id: str, field: str, value: Any) -> Optional[TaskRecord]:
    if field not in EDITABLE_FIELDS:
        raise KeyError(f"Task field {field!r} cannot be edited")
    task = report.find_task(task_id)
    if task is None:
        return None
    setattr(task, field, value)
    if field in TIME_FIELDS:
        task.working_hours = elapsed(task.start_time, task.end_time)
    return task


def remove_task(report: ReportAggregate, task_id: str) -> bool:
    before = len(report.tasks)
    report.tasks[:] = [task for task in report.tasks if task.id != task_id]
    return len(report.tasks) != before


def import_task(report: ReportAggregate, source: TaskRecord) -> TaskRecord:
    """Append a stopped copy of ``source`` dated to ``report`` with placeholder times."""
    imported = replace(
        source,
        id=new_id(),
        date=report.date,
        day=report.day,
        is_running=False,
        start_time=IMPORTED_CLOCK,
        end_time=IMPORTED_CLOCK,
        working_hours=ZERO_HOURS,
    )
    report.tasks.append(imported)
    return imported


def recent_projects(report: ReportAggregate) -> List[str]:
    """Distinct project names in order of first appearance."""
    seen: set[str] = set()
    names: List[str] = []
    for task in report.tasks:
        if task.project_name and task.project_name not in seen:
            seen.add(task.project_name)
            names.append(task.project_name)
    return names


def _seed_from(template: TaskRecord) -> Dict[str, str]:
    return {
        "project_name": template.project_name,
        "project_type": template.project_type,
        "assigned_by": template.assigned_by,
        "remarks": template.remarks,
    }


def continue_project(report: ReportAggregate, user: User, project_name: str, now: str) -> Optional[TaskRecord]:
    """Start a new task seeded from the first task logged for ``project_name``."""
    template = next((task for task in report.tasks if task.project_name == project_name), None)
    if template is None:
        return None
    return start_task(report, user, now, _seed_from(template))


def restart_task(report: ReportAggregate, user: User, task_id: str, now: str) -> Optional[TaskRecord]:
    """Start a new running task seeded from the stopped row ``task_id``.

    The row itself is left untouched. Running rows and unknown ids are ignored.
    """
    template = report.find_task(task_id)
    if template is None or template.is_running:
        return None
    return start_task(report, user, now, _seed_from(template))


__all__ = [
    "DEFAULT_ASSIGNED_BY",
    "DEFAULT_PROJECT_NAME",
    "DEFAULT_PROJECT_TYPE",
    "EDITABLE_FIELDS",
    "IMPORTED_CLOCK",
    "continue_project",
    "edit_field",
    "import_task",
    "recent_projects",
    "remove_task",
    "restart_task",
    "start_task",
    "stop_task",
]
