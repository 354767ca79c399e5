"""Calendar helpers operating on ``YYYY-MM-DD`` strings in UTC."""

from __future__ import annotations

from datetime import date, timedelta


def subtract_calendar_days(date_str: str, days: int) -> str:
    """Return ``date_str`` shifted back by ``days`` calendar days.

    Raises:
        ValueError: If ``date_str`` is not a real calendar date.
    """

    start = date.fromisoformat(date_str)
    return (start - timedelta(days=days)).isoformat()
