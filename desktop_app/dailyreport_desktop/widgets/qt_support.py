"""Qt implementations of the clipboard, mail compose and scheduler seams."""

from __future__ import annotations

import logging
from typing import Callable

from PySide6.QtCore import QMimeData, QObject, QTimer, QUrl
from PySide6.QtGui import QDesktopServices, QGuiApplication, QTextDocument

logger = logging.getLogger(__name__)


class QtClipboard:
    """Puts rich HTML (with a plain-text alternative) on the system clipboard."""

    def write_html(self, html: str) -> bool:
        clipboard = QGuiApplication.clipboard()
        if clipboard is None:
            logger.warning("No system clipboard available")
            return False
        document = QTextDocument()
        document.setHtml(html)
        mime = QMimeData()
        mime.setHtml(html)
        mime.setText(document.toPlainText())
        clipboard.setMimeData(mime)
        return True


class QtMailComposer:
    """Opens a ``mailto:`` link in the default mail client."""

    def open(self, url: str) -> None:
        if not QDesktopServices.openUrl(QUrl(url)):
            logger.warning("No handler accepted the compose link")


class _QtScheduledTask:
    def __init__(self, timer: QTimer, callback: Callable[[], None]) -> None:
        self._timer = timer
        self._callback = callback
        self._done = False
        timer.timeout.connect(self._fire)

    def _fire(self) -> None:
        self._done = True
        self._timer.deleteLater()
        self._callback()

    def cancel(self) -> None:
        if self._done:
            return
        self._done = True
        self._timer.stop()
        self._timer.deleteLater()


class QtScheduler:
    """Single-shot ``QTimer`` callbacks on the GUI thread."""

    def __init__(self, parent: QObject) -> None:
        self.parent = parent

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> _QtScheduledTask:
        timer = QTimer(self.parent)
        timer.setSingleShot(True)
        task = _QtScheduledTask(timer, callback)
        timer.start(int(delay_seconds * 1000))
        return task


__all__ = ["QtClipboard", "QtMailComposer", "QtScheduler"]
