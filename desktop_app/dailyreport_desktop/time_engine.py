"""Elapsed working hours between two wall-clock times."""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

TIME_FORMAT = "%H:%M"
MINUTES_PER_DAY = 24 * 60
ZERO_HOURS = "0.00"


def parse_clock(value: Optional[str]) -> Optional[int]:
    """Minutes since midnight for an ``HH:mm`` string, ``None`` if unparseable."""
    if not value:
        return None
    try:
        parsed = datetime.strptime(value.strip(), TIME_FORMAT)
    except ValueError:
        return None
    return parsed.hour * 60 + parsed.minute


def format_clock(moment: datetime) -> str:
    return moment.strftime(TIME_FORMAT)


def elapsed(start: Optional[str], end: Optional[str]) -> str:
    """Hours from ``start`` to ``end`` as a two-decimal string.

    An end before the start crosses midnight. Empty or unparseable input
    yields ``"0.00"``.
    """
    start_minutes = parse_clock(start)
    end_minutes = parse_clock(end)
    if start_minutes is None or end_minutes is None:
        return ZERO_HOURS
    diff = end_minutes - start_minutes
    if diff < 0:
        diff += MINUTES_PER_DAY
    hours = (Decimal(diff) / Decimal(60)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{hours:.2f}"


__all__ = ["elapsed", "format_clock", "parse_clock", "ZERO_HOURS"]
