from __future__ import annotations

import datetime as dt
from typing import Any, Iterable, List, Optional


def normalize_color_token(value: Any) -> Optional[str]:
    """Return a trimmed color token, lower-casing hex notation."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if text.startswith("#"):
        text = text.lower()
    return text


def normalize_color_selection(values: Iterable[Any]) -> List[str]:
    seen: set[str] = set()
    normalized: List[str] = []
    for value in values:
        candidate = normalize_color_token(value)
        if not candidate or candidate in seen:
            continue
        normalized.append(candidate)
        seen.add(candidate)
    return normalized


def parse_report_date(value: Any) -> dt.date:
    """Parse an ISO calendar date (``YYYY-MM-DD``) or raise ``ValueError``."""
    text = str(value or "").strip()
    if len(text) != 10:
        raise ValueError(f"Invalid report date: {value!r}")
    return dt.date.fromisoformat(text)
