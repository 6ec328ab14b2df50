from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .config import settings
from .database import transaction
from .models import Report, User, day_name, epoch_millis
from .schemas import ReportPayload, UserCreateRequest, UserUpdateRequest
from .utils import parse_report_date

logger = logging.getLogger(__name__)


ERROR_ALREADY_EXISTS = "already_exists"
ERROR_NOT_FOUND = "not_found"
ERROR_LIMIT_REACHED = "limit_reached"
ERROR_INVALID_INPUT = "invalid_input"


def _error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"code": code, "message": message})


def _get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise _error(status.HTTP_404_NOT_FOUND, ERROR_NOT_FOUND, "User not found")
    return user


# ----------------------------------------------------------------------
# Users
# ----------------------------------------------------------------------
def create_user(db: Session, payload: UserCreateRequest) -> User:
    existing = db.scalar(select(User).where(User.email == payload.email))
    if existing:
        raise _error(status.HTTP_409_CONFLICT, ERROR_ALREADY_EXISTS, "User already exists")
    user = User(
        name=payload.name,
        employee_id=payload.employee_id,
        team_name=payload.team_name,
        email=payload.email,
        default_to=payload.default_to,
        default_cc=payload.default_cc,
        saved_colors=list(payload.saved_colors),
        theme=payload.theme,
    )
    with transaction(db):
        db.add(user)
    db.refresh(user)
    logger.info("Created user %s (%s)", user.id, user.email)
    return user


def find_user_by_email(db: Session, email: str) -> User:
    user = db.scalar(select(User).where(User.email == email))
    if not user:
        raise _error(status.HTTP_404_NOT_FOUND, ERROR_NOT_FOUND, "User not found")
    return user


def update_user(db: Session, user_id: str, payload: UserUpdateRequest) -> User:
    user = _get_user(db, user_id)
    updates = payload.model_dump(exclude_unset=True)
    with transaction(db):
        for field, value in updates.items():
            if value is None:
                continue
            setattr(user, field, list(value) if field == "saved_colors" else value)
    db.refresh(user)
    return user


# ----------------------------------------------------------------------
# Reports
# ----------------------------------------------------------------------
def list_reports(db: Session, user_id: str) -> List[Report]:
    stmt = (
        select(Report)
        .where(Report.user_id == user_id)
        .order_by(Report.created_at.desc(), Report.id)
    )
    return list(db.scalars(stmt))


def count_reports(db: Session, user_id: str) -> int:
    return db.scalar(select(func.count(Report.id)).where(Report.user_id == user_id)) or 0


def _report_values(payload: ReportPayload) -> Dict[str, Any]:
    values: Dict[str, Any] = {
        "date": payload.date,
        "day": payload.day or day_name(parse_report_date(payload.date)),
        "tasks": [task.model_dump(by_alias=True) for task in payload.tasks],
        "planning_tasks": [entry.model_dump(by_alias=True) for entry in payload.planning_tasks],
        "pre_text": payload.pre_text,
        "post_text": payload.post_text,
        "is_plain_theme": payload.is_plain_theme,
    }
    if payload.theme_color:
        values["theme_color"] = payload.theme_color
    return values


def upsert_report(db: Session, payload: ReportPayload, max_reports: Optional[int] = None) -> Report:
    """Insert a new report or update an existing one.

    The per-user cap only applies to inserts; an update never fails because the
    owner already holds the maximum number of reports. ``created_at`` is set
    once on insert and survives every later update.
    """
    if db.get(User, payload.user_id) is None:
        raise _error(status.HTTP_400_BAD_REQUEST, ERROR_INVALID_INPUT, "userId does not reference a known user")

    values = _report_values(payload)

    if payload.id:
        report = db.get(Report, payload.id)
        if not report:
            raise _error(status.HTTP_404_NOT_FOUND, ERROR_NOT_FOUND, "Report not found")
        if report.user_id != payload.user_id:
            raise _error(status.HTTP_400_BAD_REQUEST, ERROR_INVALID_INPUT, "Report belongs to another user")
        with transaction(db):
            for field, value in values.items():
                setattr(report, field, value)
        db.refresh(report)
        return report

    limit = settings.max_reports_per_user if max_reports is None else max_reports
    current = count_reports(db, payload.user_id)
    if current >= limit:
        logger.info("Refused report creation for user %s: %s of %s reports", payload.user_id, current, limit)
        raise _error(
            status.HTTP_409_CONFLICT,
            ERROR_LIMIT_REACHED,
            f"Storage Limit Reached. Max {limit} reports allowed.",
        )

    values.setdefault("theme_color", settings.default_theme_color)
    report = Report(
        user_id=payload.user_id,
        created_at=payload.created_at or epoch_millis(),
        **values,
    )
    with transaction(db):
        db.add(report)
    db.refresh(report)
    logger.info("Created report %s for user %s on %s", report.id, report.user_id, report.date)
    return report


def delete_report(db: Session, report_id: str) -> None:
    report = db.get(Report, report_id)
    if not report:
        raise _error(status.HTTP_404_NOT_FOUND, ERROR_NOT_FOUND, "Report not found")
    with transaction(db):
        db.delete(report)
    logger.info("Deleted report %s", report_id)
