"""
HTML rendering of a report aggregate using Jinja2 templates.

The same template produces the live preview and the clipboard payload, so
what the user reviews is exactly what gets pasted into the mail body. Output
depends only on the aggregate and the viewer mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from .models import ReportAggregate
from .theme import LIGHT, resolve_palette

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
REPORT_TEMPLATE = "report.html.j2"


@dataclass(frozen=True, slots=True)
class Column:
    title: str
    attribute: str
    align: str = "left"
    emphasized: bool = False
    bold: bool = False


COLUMNS: Tuple[Column, ...] = (
    Column("Date", "date"),
    Column("Day", "day"),
    Column("Project Name", "project_name", bold=True),
    Column("Project Type", "project_type"),
    Column("Assigned by", "assigned_by"),
    Column("Employee Name", "employee_name"),
    Column("Employee ID", "employee_id"),
    Column("Team Name", "team_name"),
    Column("Start Time", "start_time", align="center"),
    Column("End Time", "end_time", align="center"),
    Column("Hours", "working_hours", align="center", emphasized=True),
    Column("Remarks", "remarks"),
)

LABEL_SPAN = 2


def nl2br(value: Optional[str]) -> Markup:
    """Escape ``value`` and turn newlines into ``<br/>``."""
    text = (value or "").replace("\r\n", "\n")
    return Markup("<br/>").join(escape(line) for line in text.split("\n"))


class ReportRenderer:
    """Renders report aggregates to an inline-styled HTML document."""

    def __init__(self, template_dir: Optional[Path] = None) -> None:
        self.template_dir = template_dir or TEMPLATE_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["nl2br"] = nl2br

    def render(self, report: ReportAggregate, mode: str = LIGHT) -> str:
        template = self.env.get_template(REPORT_TEMPLATE)
        return template.render(
            report=report,
            palette=resolve_palette(report, mode),
            columns=COLUMNS,
            label_span=LABEL_SPAN,
            description_span=len(COLUMNS) - LABEL_SPAN,
        )


__all__ = ["COLUMNS", "Column", "ReportRenderer", "nl2br"]
