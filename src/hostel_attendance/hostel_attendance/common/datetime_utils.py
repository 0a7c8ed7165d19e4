from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse the calendar date out of an ISO-8601 date or datetime string.

    ``2025-12-17`` and ``2025-12-17T08:15:00.000Z`` both yield 2025-12-17: the
    date part is taken as written by the client, with no timezone conversion.
    """
    text = (value or "").strip()
    if not text:
        raise ValueError("empty date")
    if len(text) == 10:
        return datetime.strptime(text, "%Y-%m-%d").date()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()
