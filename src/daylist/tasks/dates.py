# src/daylist/tasks/dates.py

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta

NEXT_MONTH_DAYS = 15

DAY_START = time(0, 0, 0, 0)
DAY_END = time(23, 59, 59, 999000)


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return to_local(value).date()
    return value


def to_local(ts: datetime) -> datetime:
    """Naive datetimes are already local; aware ones are converted and made naive."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone().replace(tzinfo=None)


def day_bounds(day: date | datetime) -> tuple[datetime, datetime]:
    """Inclusive [00:00:00.000, 23:59:59.999] of the local day."""
    d = _as_date(day)
    return datetime.combine(d, DAY_START), datetime.combine(d, DAY_END)


def start_of_day(ts: datetime) -> datetime:
    return datetime.combine(to_local(ts).date(), DAY_START)


def visible_dates(reference: date | datetime) -> list[date]:
    """
    Browsable days for the date slider.

    Every day of the reference month, then the first NEXT_MONTH_DAYS days
    of the following month (December rolls over into January).
    """
    ref = _as_date(reference)
    _, last_day = calendar.monthrange(ref.year, ref.month)
    first = ref.replace(day=1)
    out = [first + timedelta(days=i) for i in range(last_day)]

    if ref.month == 12:
        nxt = date(ref.year + 1, 1, 1)
    else:
        nxt = date(ref.year, ref.month + 1, 1)
    out.extend(nxt + timedelta(days=i) for i in range(NEXT_MONTH_DAYS))
    return out


def month_label(day: date | datetime) -> str:
    d = _as_date(day)
    return f"{calendar.month_name[d.month]} {d.year}"


class VisibleDates:
    """Caches visible_dates() per (year, month) of the reference date."""

    def __init__(self) -> None:
        self._key: tuple[int, int] | None = None
        self._dates: list[date] = []

    def get(self, reference: date | datetime) -> list[date]:
        ref = _as_date(reference)
        key = (ref.year, ref.month)
        if key != self._key:
            self._dates = visible_dates(ref)
            self._key = key
        return list(self._dates)
