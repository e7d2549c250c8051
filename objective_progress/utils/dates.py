"""Calendar date helpers shared by models and services."""

from datetime import date, datetime
from typing import Any, Union

DateLike = Union[date, datetime, str]


def coerce_date(value: Any) -> Any:
    """
    Normalize a date-like value to a calendar date.

    Accepts ``date``, ``datetime`` and ISO 8601 strings with or without a
    time part (``"2026-01-31"``, ``"2026-01-31T09:30:00Z"``). The time of day
    is discarded, which is the same as normalizing both sides to midnight.
    Anything else is returned unchanged so that model validation can reject it.

    Args:
        value: Value to normalize

    Returns:
        A ``date`` for recognised inputs, otherwise the original value
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value.strip()).date()
    return value


def days_between(start: DateLike, end: DateLike) -> int:
    """
    Whole days from ``start`` to ``end``.

    Negative when ``end`` is before ``start``. Both sides are reduced to
    calendar dates first, so the difference is always an exact day count.
    """
    start_date = coerce_date(start)
    end_date = coerce_date(end)
    return (end_date - start_date).days
