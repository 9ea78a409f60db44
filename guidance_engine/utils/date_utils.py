"""Date manipulation utilities"""

import calendar
from datetime import date, datetime
from typing import Union

from guidance_engine.domain.exceptions import InvalidSnapshotError


def as_date(value: Union[date, datetime]) -> date:
    """Reduce a timestamp to its calendar date (naive and aware alike)"""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until(target: Union[date, datetime], today: Union[date, datetime]) -> int:
    """Whole calendar days from today to target (negative when target is past)"""
    return (as_date(target) - as_date(today)).days


def _clamped(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def next_monthly_occurrence(day_of_month: int, today: Union[date, datetime]) -> date:
    """
    Next date (today inclusive) falling on day_of_month.

    Short months clamp to their last day, so day 31 lands on Feb 28/29.
    """
    if not 1 <= day_of_month <= 31:
        raise InvalidSnapshotError(f"Day of month out of range: {day_of_month}")

    today = as_date(today)
    this_month = _clamped(today.year, today.month, day_of_month)
    if this_month >= today:
        return this_month

    year, month = (today.year + 1, 1) if today.month == 12 else (today.year, today.month + 1)
    return _clamped(year, month, day_of_month)
