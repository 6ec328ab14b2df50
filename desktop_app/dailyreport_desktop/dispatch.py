"""Review-and-dispatch flow: preview, clipboard export and mail compose hand-off.

Nothing here sends mail. Dispatch copies the rendered report to the clipboard
and opens a pre-filled compose window; the user pastes the body and sends it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol
from urllib.parse import quote

from .models import ReportAggregate, User
from .renderer import ReportRenderer
from .theme import LIGHT

logger = logging.getLogger(__name__)

MISSING_RECIPIENT_NOTICE = "Attention: No 'To' recipient email found. Update Dashboard settings first."
CLIPBOARD_FAILED_NOTICE = "Could not copy the report to the clipboard."
PASTE_GUIDE_NOTICE = "Recipients and Subject are ready. Click the message body and press Ctrl+V."


class DispatchState(str, Enum):
    EDITING = "editing"
    PREVIEWING = "previewing"
    DISPATCHED = "dispatched"


class InvalidTransition(RuntimeError):
    """The requested transition is not allowed from the current state."""


class Clipboard(Protocol):
    def write_html(self, html: str) -> bool: ...


class MailComposer(Protocol):
    def open(self, url: str) -> None: ...


@dataclass(slots=True)
class DispatchOutcome:
    dispatched: bool
    state: DispatchState
    notice: str
    subject: str = ""
    compose_url: str = ""
    show_paste_guide: bool = False


def build_subject(report: ReportAggregate, user: User) -> str:
    return f"Daily Work Report - {report.date} ({user.name})"


def build_compose_url(to: str, cc: str, subject: str) -> str:
    url = f"mailto:{quote(to, safe='')}?subject={quote(subject, safe='')}"
    if cc:
        url += f"&cc={quote(cc, safe='')}"
    return url


class DispatchFlow:
    """Explicit ``Editing -> Previewing -> Dispatched`` state machine."""

    def __init__(self, renderer: ReportRenderer, clipboard: Clipboard, composer: MailComposer) -> None:
        self.renderer = renderer
        self.clipboard = clipboard
        self.composer = composer
        self.state = DispatchState.EDITING

    def preview(self, report: ReportAggregate, user: User) -> str:
        """Enter review and return the preview HTML in the viewer's mode."""
        if self.state is DispatchState.DISPATCHED:
            raise InvalidTransition("Report already dispatched; finish first")
        self.state = DispatchState.PREVIEWING
        return self.renderer.render(report, user.theme)

    def back_to_editing(self) -> None:
        if self.state is not DispatchState.PREVIEWING:
            raise InvalidTransition(f"Cannot leave preview from {self.state.value}")
        self.state = DispatchState.EDITING

    def dispatch(self, report: ReportAggregate, user: User) -> DispatchOutcome:
        if self.state is not DispatchState.PREVIEWING:
            raise InvalidTransition(f"Cannot dispatch from {self.state.value}")

        to = (user.default_to or "").strip()
        if not to:
            return DispatchOutcome(False, self.state, MISSING_RECIPIENT_NOTICE)

        html = self.renderer.render(report, LIGHT)
        if not self.clipboard.write_html(html):
            logger.warning("Clipboard write failed for report %s", report.id)
            return DispatchOutcome(False, self.state, CLIPBOARD_FAILED_NOTICE)

        cc = (user.default_cc or "").strip()
        subject = build_subject(report, user)
        url = build_compose_url(to, cc, subject)
        self.composer.open(url)
        self.state = DispatchState.DISPATCHED
        logger.info("Report %s handed to mail compose", report.id)
        return DispatchOutcome(True, self.state, PASTE_GUIDE_NOTICE, subject, url, show_paste_guide=True)

    def finish(self) -> None:
        """Dismiss the paste guide and return to editing."""
        if self.state is not DispatchState.DISPATCHED:
            raise InvalidTransition(f"Nothing to finish from {self.state.value}")
        self.state = DispatchState.EDITING


__all__ = [
    "Clipboard",
    "DispatchFlow",
    "DispatchOutcome",
    "DispatchState",
    "InvalidTransition",
    "MailComposer",
    "build_compose_url",
    "build_subject",
]
