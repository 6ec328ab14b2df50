"""Interface of the storage collaborator consumed by the desktop engine."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from .api_client import ApiClient
from .config import AppConfig
from .local_store import LocalStore
from .models import ReportAggregate, User


class ReportStorage(Protocol):
    """Users and report aggregates.

    Implementations raise :class:`~dailyreport_desktop.errors.StorageError`
    for every failure.
    """

    def create_user(self, profile: Dict[str, Any]) -> User: ...

    def find_user_by_email(self, email: str) -> Optional[User]: ...

    def update_user(self, user: User) -> User: ...

    def list_reports(self, user_id: str) -> List[ReportAggregate]: ...

    def upsert_report(self, report: ReportAggregate) -> ReportAggregate: ...

    def delete_report(self, report_id: str) -> None: ...


def build_storage(config: AppConfig) -> ReportStorage:
    """Storage backend selected by ``DAILYREPORT_STORAGE``."""
    if config.storage == "local":
        return LocalStore(config.store_file, max_reports=config.max_reports)
    return ApiClient(config.api_base_url, token=config.api_token)


__all__ = ["ReportStorage", "build_storage"]
