"""JSON-file storage for running the desktop app without the API."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Optional

from .errors import ErrorKind, LimitReachedError, StorageError, ValidationError
from .models import ReportAggregate, User, new_id, now_millis

logger = logging.getLogger(__name__)

DEFAULT_MAX_REPORTS = 30
REQUIRED_PROFILE_FIELDS = ("name", "employeeId", "teamName", "email")


class LocalStore:
    """Stores users and reports in a single JSON document."""

    def __init__(self, path: Path, max_reports: int = DEFAULT_MAX_REPORTS) -> None:
        self.path = Path(path)
        self.max_reports = max_reports
        self._lock = RLock()

    # ------------------------------------------------------------------
    # File handling
    # ------------------------------------------------------------------
    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.path.exists():
            return {"users": [], "reports": []}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(ErrorKind.UNAVAILABLE, f"Cannot read {self.path}: {exc}") from exc
        data.setdefault("users", [])
        data.setdefault("reports", [])
        return data

    def _write(self, data: Dict[str, List[Dict[str, Any]]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            raise StorageError(ErrorKind.UNAVAILABLE, f"Cannot write {self.path}: {exc}") from exc

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def create_user(self, profile: Dict[str, Any]) -> User:
        missing = [name for name in REQUIRED_PROFILE_FIELDS if not str(profile.get(name) or "").strip()]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        with self._lock:
            data = self._load()
            email = str(profile["email"]).strip().lower()
            if any(item.get("email") == email for item in data["users"]):
                raise StorageError(ErrorKind.CONFLICT, "User already exists")
            user = User.from_dict({**profile, "id": new_id(), "email": email})
            data["users"].append(user.to_dict())
            self._write(data)
        logger.info("Created local user %s", user.id)
        return user

    def find_user_by_email(self, email: str) -> Optional[User]:
        needle = email.strip().lower()
        with self._lock:
            data = self._load()
        for item in data["users"]:
            if item.get("email") == needle:
                return User.from_dict(item)
        return None

    def update_user(self, user: User) -> User:
        with self._lock:
            data = self._load()
            for index, item in enumerate(data["users"]):
                if item.get("id") == user.id:
                    data["users"][index] = user.to_dict()
                    self._write(data)
                    return user
        raise StorageError(ErrorKind.NOT_FOUND, "User not found")

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------
    def list_reports(self, user_id: str) -> List[ReportAggregate]:
        with self._lock:
            data = self._load()
        owned = [item for item in data["reports"] if item.get("userId") == user_id]
        owned.sort(key=lambda item: item.get("createdAt") or 0, reverse=True)
        return [ReportAggregate.from_dict(item) for item in owned]

    def upsert_report(self, report: ReportAggregate) -> ReportAggregate:
        if not report.user_id:
            raise ValidationError("userId is required")
        with self._lock:
            data = self._load()
            payload = report.to_dict()
            if report.id:
                for index, item in enumerate(data["reports"]):
                    if item.get("id") == report.id:
                        payload["createdAt"] = item.get("createdAt") or payload["createdAt"]
                        data["reports"][index] = payload
                        self._write(data)
                        return ReportAggregate.from_dict(payload)
                raise StorageError(ErrorKind.NOT_FOUND, "Report not found")

            owned = sum(1 for item in data["reports"] if item.get("userId") == report.user_id)
            if owned >= self.max_reports:
                raise LimitReachedError(f"Storage Limit Reached. Max {self.max_reports} reports allowed.")
            payload["id"] = new_id()
            payload["createdAt"] = payload.get("createdAt") or now_millis()
            data["reports"].append(payload)
            self._write(data)
        logger.info("Created local report %s for %s", payload["id"], report.date)
        return ReportAggregate.from_dict(payload)

    def delete_report(self, report_id: str) -> None:
        with self._lock:
            data = self._load()
            remaining = [item for item in data["reports"] if item.get("id") != report_id]
            if len(remaining) == len(data["reports"]):
                raise StorageError(ErrorKind.NOT_FOUND, "Report not found")
            data["reports"] = remaining
            self._write(data)


__all__ = ["LocalStore"]
