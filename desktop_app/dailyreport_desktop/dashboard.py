"""Report list of the signed-in user: create, delete, recipient settings."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Tuple

from .errors import LimitReachedError, ValidationError
from .models import ReportAggregate
from .session import SessionContext
from .storage import ReportStorage

logger = logging.getLogger(__name__)

DEFAULT_MAX_REPORTS = 30


class ReportDashboard:
    def __init__(self, storage: ReportStorage, session: SessionContext, max_reports: int = DEFAULT_MAX_REPORTS) -> None:
        self.storage = storage
        self.session = session
        self.max_reports = max_reports
        self.reports: List[ReportAggregate] = []

    def refresh(self) -> List[ReportAggregate]:
        user = self.session.require_user()
        self.reports = self.storage.list_reports(user.id)
        return self.reports

    def create_report(self, report_date: str) -> ReportAggregate:
        """Create and store an empty report for ``report_date``.

        Refused with :class:`LimitReachedError` once the user holds the maximum
        number of reports, counted from a fresh listing. Several reports for the
        same date are allowed.
        """
        user = self.session.require_user()
        try:
            parsed = date.fromisoformat(report_date.strip())
        except ValueError as exc:
            raise ValidationError(f"Invalid date: {report_date!r}") from exc

        if len(self.refresh()) >= self.max_reports:
            raise LimitReachedError("Storage Limit Reached. Please delete older reports.")

        saved = self.storage.upsert_report(ReportAggregate.new(parsed.isoformat(), user))
        self.reports.insert(0, saved)
        logger.info("Created report %s for %s", saved.id, saved.date)
        return saved

    def delete_report(self, report_id: str) -> None:
        self.storage.delete_report(report_id)
        self.reports = [report for report in self.reports if report.id != report_id]

    def update_recipients(self, to: str, cc: str) -> None:
        user = self.session.require_user()
        user.default_to = to.strip()
        user.default_cc = cc.strip()
        self.session.update_user(user)

    def storage_usage(self) -> Tuple[int, int, float]:
        count = len(self.reports)
        percent = min(count / self.max_reports * 100, 100.0) if self.max_reports else 100.0
        return count, self.max_reports, percent


__all__ = ["ReportDashboard"]
