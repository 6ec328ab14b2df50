"""Debounced persistence of the report open in the editor."""

from __future__ import annotations

import logging
from enum import Enum
from threading import Lock
from typing import Callable, Optional

from .errors import StorageError
from .models import ReportAggregate
from .scheduling import Debouncer, Scheduler, ThreadingScheduler
from .storage import ReportStorage

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.5


class SaveStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SAVING = "saving"
    SAVED = "saved"
    NOT_SAVED = "not_saved"


class AutosaveController:
    """Pushes the aggregate to storage once edits have been quiet for a while.

    Saves run one at a time, so a save that starts while an insert is still
    in flight snapshots the aggregate only after the new id was adopted.

    Edits stay in memory when a save fails; the failure is kept in
    ``last_error`` and reported as ``SaveStatus.NOT_SAVED`` until the next
    successful save.
    """

    def __init__(
        self,
        storage: ReportStorage,
        report: ReportAggregate,
        *,
        scheduler: Optional[Scheduler] = None,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        on_status: Optional[Callable[[SaveStatus], None]] = None,
    ) -> None:
        self.storage = storage
        self.report = report
        self.on_status = on_status
        self.status = SaveStatus.IDLE
        self.last_error: Optional[StorageError] = None
        self.save_count = 0
        self._save_lock = Lock()
        self._debouncer = Debouncer(scheduler or ThreadingScheduler(), delay_seconds, self._save)

    def notify_changed(self) -> None:
        self._set_status(SaveStatus.PENDING)
        self._debouncer.trigger()

    def flush(self) -> bool:
        """Save a pending change immediately."""
        return self._debouncer.flush()

    def cancel(self) -> None:
        self._debouncer.cancel()
        if self.status == SaveStatus.PENDING:
            self._set_status(SaveStatus.IDLE)

    def _save(self) -> None:
        with self._save_lock:
            self._save_locked()

    def _save_locked(self) -> None:
        snapshot = ReportAggregate.from_dict(self.report.to_dict())
        self._set_status(SaveStatus.SAVING)
        try:
            saved = self.storage.upsert_report(snapshot)
        except StorageError as exc:
            self.last_error = exc
            logger.warning("Report %s not saved (%s): %s", snapshot.id or "<new>", exc.kind.value, exc)
            self._set_status(SaveStatus.NOT_SAVED)
            return
        self.save_count += 1
        self.last_error = None
        if not self.report.id:
            self.report.id = saved.id
            self.report.created_at = saved.created_at
        logger.debug("Report %s saved", saved.id)
        if self.status == SaveStatus.SAVING:
            self._set_status(SaveStatus.SAVED)

    def _set_status(self, status: SaveStatus) -> None:
        self.status = status
        if self.on_status is not None:
            self.on_status(status)


__all__ = ["AutosaveController", "SaveStatus", "DEFAULT_DELAY_SECONDS"]
