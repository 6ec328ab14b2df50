"""Next-working-day planning rows."""

from __future__ import annotations

from typing import Optional

from .models import DEFAULT_PLANNING_LABEL, PlanningEntry, ReportAggregate, new_id

EDITABLE_FIELDS = frozenset({"label", "description"})


def add_entry(report: ReportAggregate) -> PlanningEntry:
    entry = PlanningEntry(id=new_id(), label=DEFAULT_PLANNING_LABEL, description="")
    report.planning_tasks.append(entry)
    return entry


def edit_entry(report: ReportAggregate, entry_id: str, field: str, value: str) -> Optional[PlanningEntry]:
    if field not in EDITABLE_FIELDS:
        raise KeyError(f"Planning field {field!r} cannot be edited")
    entry = report.find_entry(entry_id)
    if entry is None:
        return None
    setattr(entry, field, value)
    return entry


def remove_entry(report: ReportAggregate, entry_id: str) -> bool:
    before = len(report.planning_tasks)
    report.planning_tasks[:] = [entry for entry in report.planning_tasks if entry.id != entry_id]
    return len(report.planning_tasks) != before


__all__ = ["add_entry", "edit_entry", "remove_entry"]
