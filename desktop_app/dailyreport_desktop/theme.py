"""Report theming: palette resolution and the user's color library."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from .models import DEFAULT_THEME_COLOR, PLAIN_COLOR, ReportAggregate, User

LIGHT = "light"
DARK = "dark"

PLAIN_TOKENS = frozenset({PLAIN_COLOR, "plain"})

DEFAULT_COLOR_SUGGESTIONS: Tuple[Tuple[str, str], ...] = (
    ("Plain", PLAIN_COLOR),
    ("Green", "#70ad47"),
    ("Blue", "#4472c4"),
    ("Orange", "#ed7d31"),
    ("Red", "#c00000"),
)


@dataclass(frozen=True, slots=True)
class Palette:
    header_background: str
    header_text: str
    border: str
    row_backgrounds: Tuple[str, str]
    label_background: str
    body_text: str
    page_background: str
    hours_text: str


def resolve_palette(report: ReportAggregate, mode: str = LIGHT) -> Palette:
    """Colors for ``report`` as seen by a viewer in ``mode``.

    The plain theme never uses ``theme_color``.
    """
    dark = mode == DARK
    if report.is_plain_theme:
        return Palette(
            header_background="#0f172a" if dark else "#ffffff",
            header_text="#ffffff" if dark else "#000000",
            border="#000000",
            row_backgrounds=("#0f172a", "#1e293b") if dark else ("#ffffff", "#f5f5f5"),
            label_background="#1e293b" if dark else "#ffffff",
            body_text="#e2e8f0" if dark else "#000000",
            page_background="#0f172a" if dark else "#ffffff",
            hours_text="#a5b4fc" if dark else "#000000",
        )
    return Palette(
        header_background=report.theme_color or DEFAULT_THEME_COLOR,
        header_text="#ffffff",
        border="#475569" if dark else "#e2e8f0",
        row_backgrounds=("#1e293b", "#0f172a") if dark else ("#f8fafc", "#ffffff"),
        label_background="#334155" if dark else "#f1f5f9",
        body_text="#e2e8f0" if dark else "#1e293b",
        page_background="#0f172a" if dark else "#ffffff",
        hours_text="#a5b4fc" if dark else "#4f46e5",
    )


def select_color(report: ReportAggregate, color: str) -> None:
    """Apply a picked color; the plain suggestion switches to the plain theme."""
    report.theme_color = color
    report.is_plain_theme = color in PLAIN_TOKENS


class ColorSaveResult(str, Enum):
    SAVED = "saved"
    DUPLICATE = "duplicate"
    IGNORED = "ignored"


def save_color(user: User, color: str) -> ColorSaveResult:
    """Append ``color`` to the user's library, keeping insertion order unique."""
    if not color or color in PLAIN_TOKENS:
        return ColorSaveResult.IGNORED
    if color in user.saved_colors:
        return ColorSaveResult.DUPLICATE
    user.saved_colors = [*user.saved_colors, color]
    return ColorSaveResult.SAVED


def remove_color(user: User, color: str) -> bool:
    remaining: List[str] = [saved for saved in user.saved_colors if saved != color]
    changed = len(remaining) != len(user.saved_colors)
    user.saved_colors = remaining
    return changed


def toggle_viewer_mode(user: User) -> str:
    user.theme = LIGHT if user.theme == DARK else DARK
    return user.theme


__all__ = [
    "DARK",
    "DEFAULT_COLOR_SUGGESTIONS",
    "LIGHT",
    "ColorSaveResult",
    "Palette",
    "remove_color",
    "resolve_palette",
    "save_color",
    "select_color",
    "toggle_viewer_mode",
]
