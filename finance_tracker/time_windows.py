"""Calendar window helpers shared by every aggregation.

All boundaries are calendar days.  Every helper takes the reference date
explicitly; nothing here reads the clock.  Month arithmetic goes through
:class:`pandas.Period` so month lengths and year rollovers come for free.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Union

import pandas as pd

DateLike = Union[date, datetime, str, pd.Timestamp]

PRESET_DAYS: Dict[str, int] = {
    '7d': 7,
    '30d': 30,
    '90d': 90,
    '1y': 365,
}


def as_date(value: DateLike) -> date:
    """Normalise a date, datetime, timestamp or ISO string to a ``date``."""
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValueError(f"Not a calendar date: {value!r}") from exc


@dataclass(frozen=True)
class DateWindow:
    """Inclusive calendar-day window ``[start, end]``."""

    start: date
    end: date

    def contains(self, day: DateLike) -> bool:
        return self.start <= as_date(day) <= self.end

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return max(0, (self.end - self.start).days + 1)

    @property
    def span_days(self) -> int:
        """Distance between the bounds in days (``end - start``)."""
        return (self.end - self.start).days

    def __str__(self) -> str:
        return f"{self.start.isoformat()} to {self.end.isoformat()}"


def _period_window(period: pd.Period) -> DateWindow:
    return DateWindow(period.start_time.date(), period.end_time.date())


def month_window(ref: DateLike) -> DateWindow:
    """First through last day of the month containing ``ref``."""
    return _period_window(pd.Period(as_date(ref), freq='M'))


def offset_month_window(ref: DateLike, months: int) -> DateWindow:
    """Month window ``months`` calendar months away from ``ref`` (negative = past)."""
    return _period_window(pd.Period(as_date(ref), freq='M') + months)


def previous_month_window(ref: DateLike) -> DateWindow:
    return offset_month_window(ref, -1)


def trailing_days(ref: DateLike, count: int) -> List[date]:
    """``count`` consecutive calendar days ending at ``ref``, oldest first."""
    end = as_date(ref)
    return [end - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def trailing_months(ref: DateLike, count: int) -> List[pd.Period]:
    """``count`` consecutive month periods ending at the month of ``ref``, oldest first."""
    current = pd.Period(as_date(ref), freq='M')
    return [current - offset for offset in range(count - 1, -1, -1)]


def trailing_window(ref: DateLike, days: int) -> DateWindow:
    """Window from ``days`` days before ``ref`` up to and including ``ref``."""
    end = as_date(ref)
    return DateWindow(end - timedelta(days=days), end)


def preset_window(ref: DateLike, preset: str) -> DateWindow:
    """Trailing window for one of the named presets (``7d``, ``30d``, ``90d``, ``1y``)."""
    try:
        days = PRESET_DAYS[preset]
    except KeyError:
        raise ValueError(
            f"Unknown period preset {preset!r}; expected one of {', '.join(PRESET_DAYS)}"
        ) from None
    return trailing_window(ref, days)
