"""Entry point of the desktop application."""

from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication, QMessageBox

from .config import load_config
from .errors import StorageError
from .parsing import GeminiTaskParser
from .session import SessionContext
from .storage import build_storage
from .widgets.dashboard_window import LoginDialog, ReportDashboardWindow

logger = logging.getLogger(__name__)


def main() -> None:
    """Start the Qt application."""

    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Daily Report")
    app.setOrganizationName("DailyReport")

    storage = build_storage(config)
    parser = GeminiTaskParser(config.gemini_api_key, model=config.gemini_model) if config.gemini_api_key else None
    session = SessionContext(storage, config.session_file)
    session.load()

    if not session.is_authenticated and not LoginDialog(session).exec():
        sys.exit(0)

    window = ReportDashboardWindow(
        session,
        storage,
        max_reports=config.max_reports,
        parser=parser,
        autosave_delay=config.autosave_seconds,
    )
    window.show()

    try:
        window.refresh_all()
    except StorageError as exc:  # pragma: no cover - UI feedback
        logger.warning("Could not load reports: %s", exc)
        QMessageBox.warning(window, "Storage Error", str(exc))

    sys.exit(app.exec())


__all__ = ["main"]
