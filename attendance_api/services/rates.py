# attendance_api/services/rates.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from attendance_api.services.records import AttendanceRecord
from attendance_api.services.status import ATTENDED, AttendanceStatus


@dataclass(frozen=True)
class ClassAttendanceSummary:
    learning_progress: Optional[str]
    page: Optional[int]
    line: Optional[int]
    attendance_rate: int
    latest_date: Optional[date]


@dataclass(frozen=True)
class AttendanceStats:
    total: int
    present: int
    online: int
    leave: int
    absent: int
    holiday: int
    attendance_rate: int
    latest_date: Optional[date]


def attendance_rate(records: Iterable[AttendanceRecord]) -> int:
    """Percent of non-holiday records marked present or online, rounded half up.

    0 when every record is a holiday (or there are none).
    """
    attended = 0
    total_non_holiday = 0
    for record in records:
        if record.status == AttendanceStatus.HOLIDAY:
            continue
        total_non_holiday += 1
        if record.status in ATTENDED:
            attended += 1
    if total_non_holiday == 0:
        return 0
    # integer half-up rounding of 100 * attended / total
    return (200 * attended + total_non_holiday) // (2 * total_non_holiday)


def latest_date(records: Iterable[AttendanceRecord]) -> Optional[date]:
    return max((r.date for r in records), default=None)


def latest_session_records(records: Iterable[AttendanceRecord]) -> List[AttendanceRecord]:
    records = list(records)
    latest = latest_date(records)
    return [r for r in records if r.date == latest]


def latest_session_rate(records: Iterable[AttendanceRecord]) -> int:
    return attendance_rate(latest_session_records(records))


def class_summary(records: Iterable[AttendanceRecord]) -> ClassAttendanceSummary:
    """Progress fields from the most recent session, rate over all history."""
    records = list(records)
    latest = latest_session_records(records)
    progress = next((r for r in latest if r.learning_progress or r.page or r.line), None)
    return ClassAttendanceSummary(
        learning_progress=progress.learning_progress if progress else None,
        page=progress.page if progress else None,
        line=progress.line if progress else None,
        attendance_rate=attendance_rate(records),
        latest_date=latest[0].date if latest else None,
    )


def latest_session_stats(records: Iterable[AttendanceRecord]) -> AttendanceStats:
    latest = latest_session_records(records)

    def count(status):
        return sum(1 for r in latest if r.status == status)

    return AttendanceStats(
        total=len(latest),
        present=count(AttendanceStatus.PRESENT),
        online=count(AttendanceStatus.ONLINE),
        leave=count(AttendanceStatus.LEAVE),
        absent=count(AttendanceStatus.ABSENT),
        holiday=count(AttendanceStatus.HOLIDAY),
        attendance_rate=attendance_rate(latest),
        latest_date=latest[0].date if latest else None,
    )
