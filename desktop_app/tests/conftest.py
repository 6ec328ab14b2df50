from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from dailyreport_desktop.errors import ErrorKind, LimitReachedError, StorageError
from dailyreport_desktop.models import ReportAggregate, User, new_id, now_millis
from dailyreport_desktop.session import SessionContext


class MemoryStorage:
    """In-memory stand-in for the storage API."""

    def __init__(self, max_reports: int = 30) -> None:
        self.max_reports = max_reports
        self.users: Dict[str, User] = {}
        self.reports: Dict[str, ReportAggregate] = {}
        self.upserts: List[ReportAggregate] = []
        self.fail_with: Optional[StorageError] = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def create_user(self, profile: Dict[str, Any]) -> User:
        self._check()
        email = profile["email"].strip().lower()
        if any(user.email == email for user in self.users.values()):
            raise StorageError(ErrorKind.CONFLICT, "User already exists")
        user = User.from_dict({**profile, "id": new_id(), "email": email})
        self.users[user.id] = user
        return User.from_dict(user.to_dict())

    def find_user_by_email(self, email: str) -> Optional[User]:
        self._check()
        needle = email.strip().lower()
        for user in self.users.values():
            if user.email == needle:
                return User.from_dict(user.to_dict())
        return None

    def update_user(self, user: User) -> User:
        self._check()
        if user.id not in self.users:
            raise StorageError(ErrorKind.NOT_FOUND, "User not found")
        self.users[user.id] = User.from_dict(user.to_dict())
        return User.from_dict(user.to_dict())

    def list_reports(self, user_id: str) -> List[ReportAggregate]:
        self._check()
        owned = [report for report in self.reports.values() if report.user_id == user_id]
        owned.sort(key=lambda report: report.created_at, reverse=True)
        return [ReportAggregate.from_dict(report.to_dict()) for report in owned]

    def upsert_report(self, report: ReportAggregate) -> ReportAggregate:
        self._check()
        self.upserts.append(ReportAggregate.from_dict(report.to_dict()))
        stored = ReportAggregate.from_dict(report.to_dict())
        if report.id:
            if report.id not in self.reports:
                raise StorageError(ErrorKind.NOT_FOUND, "Report not found")
            stored.created_at = self.reports[report.id].created_at
        else:
            owned = sum(1 for item in self.reports.values() if item.user_id == report.user_id)
            if owned >= self.max_reports:
                raise LimitReachedError("Storage Limit Reached.")
            stored.id = new_id()
            stored.created_at = stored.created_at or now_millis()
        self.reports[stored.id] = stored
        return ReportAggregate.from_dict(stored.to_dict())

    def delete_report(self, report_id: str) -> None:
        self._check()
        if self.reports.pop(report_id, None) is None:
            raise StorageError(ErrorKind.NOT_FOUND, "Report not found")


class _ManualTask:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose callbacks only run when the test says so."""

    def __init__(self) -> None:
        self.tasks: List[_ManualTask] = []

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> _ManualTask:
        task = _ManualTask(delay_seconds, callback)
        self.tasks.append(task)
        return task

    @property
    def live(self) -> List[_ManualTask]:
        return [task for task in self.tasks if not task.cancelled]

    def run_pending(self) -> int:
        ran = 0
        for task in list(self.tasks):
            if not task.cancelled:
                task.cancelled = True
                task.callback()
                ran += 1
        return ran


class RecordingClipboard:
    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.writes: List[str] = []

    def write_html(self, html: str) -> bool:
        self.writes.append(html)
        return self.succeed


class RecordingComposer:
    def __init__(self) -> None:
        self.urls: List[str] = []

    def open(self, url: str) -> None:
        self.urls.append(url)


class SteppingClock:
    """Returns a fixed time that tests move forward explicitly."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def set(self, hour: int, minute: int) -> None:
        self.current = self.current.replace(hour=hour, minute=minute)


@pytest.fixture()
def profile() -> dict:
    return {
        "name": "Asha Rao",
        "employeeId": "E-1042",
        "teamName": "Platform",
        "email": "asha@example.com",
    }


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def clipboard() -> RecordingClipboard:
    return RecordingClipboard()


@pytest.fixture()
def composer() -> RecordingComposer:
    return RecordingComposer()


@pytest.fixture()
def clock() -> SteppingClock:
    return SteppingClock(datetime(2024, 3, 4, 9, 0))


@pytest.fixture()
def session(storage: MemoryStorage, profile: dict, tmp_path: Path) -> SessionContext:
    context = SessionContext(storage, tmp_path / "session.json")
    context.signup(profile)
    return context


@pytest.fixture()
def user(session: SessionContext) -> User:
    return session.require_user()


@pytest.fixture()
def report(user: User) -> ReportAggregate:
    return ReportAggregate.new("2024-03-04", user, created_at=1_700_000_000_000)


@pytest.fixture()
def stored_report(storage: MemoryStorage, report: ReportAggregate) -> ReportAggregate:
    saved = storage.upsert_report(report)
    storage.upserts.clear()
    return saved
