"""Data models of the report engine.

The ``from_dict``/``to_dict`` pairs use the camelCase shape stored by the
report service, so aggregates round-trip through any existing store.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

DEFAULT_THEME_COLOR = "#70ad47"
PLAIN_COLOR = "white"
DEFAULT_PLANNING_LABEL = "Next Working Day Task"


def new_id() -> str:
    return str(uuid.uuid4())


def now_millis() -> int:
    return int(time.time() * 1000)


def day_name(value: str) -> str:
    """English weekday name for an ISO date string."""
    return DAY_NAMES[date.fromisoformat(value).weekday()]


@dataclass(slots=True)
class User:
    """Signed-in user with the preferences the report engine reads."""

    id: str
    name: str
    employee_id: str
    team_name: str
    email: str
    default_to: str = ""
    default_cc: str = ""
    saved_colors: List[str] = field(default_factory=list)
    theme: str = "light"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            employee_id=data.get("employeeId", ""),
            team_name=data.get("teamName", ""),
            email=data.get("email", ""),
            default_to=data.get("defaultTo") or "",
            default_cc=data.get("defaultCc") or "",
            saved_colors=list(data.get("savedColors") or []),
            theme=data.get("theme") or "light",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "employeeId": self.employee_id,
            "teamName": self.team_name,
            "email": self.email,
            "defaultTo": self.default_to,
            "defaultCc": self.default_cc,
            "savedColors": list(self.saved_colors),
            "theme": self.theme,
        }


@dataclass(slots=True)
class TaskRecord:
    """One logged work interval."""

    id: str
    date: str
    day: str
    project_name: str
    project_type: str
    assigned_by: str
    employee_name: str
    employee_id: str
    team_name: str
    start_time: str = ""
    end_time: str = ""
    working_hours: str = "0.00"
    remarks: str = ""
    is_running: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskRecord":
        return cls(
            id=str(data.get("id") or new_id()),
            date=data.get("date", ""),
            day=data.get("day", ""),
            project_name=data.get("projectName", ""),
            project_type=data.get("projectType", ""),
            assigned_by=data.get("assignedBy", ""),
            employee_name=data.get("employeeName", ""),
            employee_id=data.get("employeeId", ""),
            team_name=data.get("teamName", ""),
            start_time=data.get("startTime") or "",
            end_time=data.get("endTime") or "",
            working_hours=data.get("workingHours") or "0.00",
            remarks=data.get("remarks") or "",
            is_running=bool(data.get("isRunning", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "day": self.day,
            "projectName": self.project_name,
            "projectType": self.project_type,
            "assignedBy": self.assigned_by,
            "employeeName": self.employee_name,
            "employeeId": self.employee_id,
            "teamName": self.team_name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "workingHours": self.working_hours,
            "remarks": self.remarks,
            "isRunning": self.is_running,
        }


@dataclass(slots=True)
class PlanningEntry:
    """Free-text plan for the next working day."""

    id: str
    label: str = DEFAULT_PLANNING_LABEL
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlanningEntry":
        return cls(
            id=str(data.get("id") or new_id()),
            label=data.get("label") or DEFAULT_PLANNING_LABEL,
            description=data.get("description") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "description": self.description}


@dataclass(slots=True)
class ReportAggregate:
    """The per-date document: tasks, planning rows, texts and theme."""

    id: str
    user_id: str
    date: str
    day: str
    tasks: List[TaskRecord] = field(default_factory=list)
    planning_tasks: List[PlanningEntry] = field(default_factory=list)
    pre_text: str = ""
    post_text: str = ""
    theme_color: str = DEFAULT_THEME_COLOR
    is_plain_theme: bool = False
    created_at: int = 0

    @classmethod
    def new(cls, report_date: str, user: User, created_at: Optional[int] = None) -> "ReportAggregate":
        """Unsaved aggregate for ``report_date``; storage assigns the id."""
        return cls(
            id="",
            user_id=user.id,
            date=report_date,
            day=day_name(report_date),
            created_at=created_at if created_at is not None else now_millis(),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportAggregate":
        report_date = data.get("date", "")
        return cls(
            id=str(data.get("id") or ""),
            user_id=str(data.get("userId", "")),
            date=report_date,
            day=data.get("day") or (day_name(report_date) if report_date else ""),
            tasks=[TaskRecord.from_dict(item) for item in data.get("tasks") or []],
            planning_tasks=[PlanningEntry.from_dict(item) for item in data.get("planningTasks") or []],
            pre_text=data.get("preText") or "",
            post_text=data.get("postText") or "",
            theme_color=data.get("themeColor") or DEFAULT_THEME_COLOR,
            is_plain_theme=bool(data.get("isPlainTheme", False)),
            created_at=int(data.get("createdAt") or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "date": self.date,
            "day": self.day,
            "tasks": [task.to_dict() for task in self.tasks],
            "planningTasks": [entry.to_dict() for entry in self.planning_tasks],
            "preText": self.pre_text,
            "postText": self.post_text,
            "themeColor": self.theme_color,
            "isPlainTheme": self.is_plain_theme,
            "createdAt": self.created_at,
        }

    def find_task(self, task_id: str) -> Optional[TaskRecord]:
        return next((task for task in self.tasks if task.id == task_id), None)

    def find_entry(self, entry_id: str) -> Optional[PlanningEntry]:
        return next((entry for entry in self.planning_tasks if entry.id == entry_id), None)

    def running_tasks(self) -> List[TaskRecord]:
        return [task for task in self.tasks if task.is_running]


__all__ = [
    "DEFAULT_PLANNING_LABEL",
    "DEFAULT_THEME_COLOR",
    "PLAIN_COLOR",
    "PlanningEntry",
    "ReportAggregate",
    "TaskRecord",
    "User",
    "day_name",
    "new_id",
    "now_millis",
]
