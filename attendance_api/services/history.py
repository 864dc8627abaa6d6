# attendance_api/services/history.py
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional

from attendance_api.services.records import AttendanceRecord, parse_date
from attendance_api.services.sessions import group_sessions, tally_weeks
from attendance_api.services.weeks import WeekRange, build_week_ranges, monday_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeekBucket:
    week_start: date
    week_end: date
    label: str
    attendance_count: int
    is_missing: bool
    is_holiday: bool
    holiday_count: int
    present: int = 0
    online: int = 0
    leave: int = 0
    absent: int = 0
    total_records: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def assemble_buckets(weeks: List[WeekRange],
                     records: Iterable[AttendanceRecord]) -> List[WeekBucket]:
    """Classifies every week in `weeks`, including weeks with no sessions."""
    tallies = tally_weeks(group_sessions(records), weeks)
    buckets = []
    for week, tally in zip(weeks, tallies):
        is_missing = tally.session_count == 0
        buckets.append(WeekBucket(
            week_start=week.start,
            week_end=week.end,
            label=week.label,
            attendance_count=tally.attendance_count,
            is_missing=is_missing,
            is_holiday=(not is_missing
                        and tally.holiday_count > 0
                        and tally.attendance_count == 0),
            holiday_count=tally.holiday_count,
            present=tally.present,
            online=tally.online,
            leave=tally.leave,
            absent=tally.absent,
            total_records=tally.total_records,
        ))
    return buckets


def history_bounds(class_start_date, reference_date: Optional[date] = None):
    """Returns (lower Monday, upper Monday) for a class history.

    The lower bound is the class start week, or the week holding Jan 1st
    of the reference year if the start date is missing or unparsable.
    """
    reference = reference_date or date.today()
    lower = None
    if class_start_date:
        try:
            lower = monday_of(parse_date(class_start_date))
        except (ValueError, TypeError):
            logger.warning(f"Unparsable class start date {class_start_date!r}, using year start")
    if lower is None:
        lower = monday_of(date(reference.year, 1, 1))
    upper = max(monday_of(reference), lower)
    return lower, upper


def build_weekly_history(records: Iterable[AttendanceRecord],
                         class_start_date=None,
                         reference_date: Optional[date] = None) -> List[WeekBucket]:
    lower, upper = history_bounds(class_start_date, reference_date)
    # Full weeks: the last week ends on its Sunday, not on the upper Monday
    weeks = build_week_ranges(lower, upper + timedelta(days=6))
    return assemble_buckets(weeks, records)


def missing_weeks(buckets: Iterable[WeekBucket]) -> List[WeekBucket]:
    return [b for b in buckets if b.is_missing]


def holiday_weeks(buckets: Iterable[WeekBucket]) -> List[WeekBucket]:
    return [b for b in buckets if b.is_holiday]
