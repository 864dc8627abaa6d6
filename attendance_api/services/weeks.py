# attendance_api/services/weeks.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List

from attendance_api.core.exceptions import InvalidRange

ONE_WEEK = timedelta(days=7)


def monday_of(day: date) -> date:
    """Monday on or before `day`."""
    return day - timedelta(days=day.weekday())


def _fmt_label(day: date) -> str:
    return day.strftime("%m/%d")


@dataclass(frozen=True)
class WeekRange:
    """One calendar week.

    `monday`/`sunday` is the full calendar week used to match records;
    `start`/`end` are the same week clipped to the query window, used
    for display only.
    """

    monday: date
    sunday: date
    start: date
    end: date

    @property
    def label(self) -> str:
        return f"{_fmt_label(self.start)}-{_fmt_label(self.end)}"

    def contains(self, day: date) -> bool:
        return self.monday <= day <= self.sunday


def build_week_ranges(start_date: date, end_date: date) -> List[WeekRange]:
    if start_date > end_date:
        raise InvalidRange(f"start date {start_date} is after end date {end_date}")

    weeks = []
    current = monday_of(start_date)
    while current <= end_date:
        sunday = current + timedelta(days=6)
        weeks.append(WeekRange(
            monday=current,
            sunday=sunday,
            start=max(current, start_date),
            end=min(sunday, end_date),
        ))
        current += ONE_WEEK
    return weeks
