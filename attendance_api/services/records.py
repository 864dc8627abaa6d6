# attendance_api/services/records.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, List, Optional

from attendance_api.core.exceptions import InvalidStatus
from attendance_api.services.status import AttendanceStatus, decode

logger = logging.getLogger(__name__)

ISO_DAY = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass(frozen=True)
class AttendanceRecord:
    class_id: int
    student_id: Optional[int]
    date: date
    status: AttendanceStatus
    learning_progress: Optional[str] = None
    page: Optional[int] = None
    line: Optional[int] = None

    @property
    def is_holiday(self) -> bool:
        return self.status == AttendanceStatus.HOLIDAY


def parse_date(value) -> date:
    """Accepts date, datetime or a YYYY-MM-DD string (time part ignored)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
    raise ValueError(f"Not a date: {value!r}")


def parse_iso_day(value: str) -> date:
    """Strict YYYY-MM-DD for request parameters; stored rows go through parse_date."""
    if not isinstance(value, str) or not ISO_DAY.fullmatch(value):
        raise ValueError(f"Not a YYYY-MM-DD date: {value!r}")
    return date.fromisoformat(value)


def _get(row: Any, *names):
    for name in names:
        if isinstance(row, dict):
            if name in row:
                return row[name]
        elif hasattr(row, name):
            return getattr(row, name)
    return None


def to_record(row: Any) -> AttendanceRecord:
    """Builds a record from an ORM row or a mapping with store column names."""
    class_id = _get(row, "class_id")
    if class_id is None:
        raise ValueError("Row has no class_id")
    raw_date = _get(row, "attendance_date", "date")
    if raw_date is None:
        raise ValueError("Row has no attendance date")
    return AttendanceRecord(
        class_id=int(class_id),
        student_id=_get(row, "student_id"),
        date=parse_date(raw_date),
        status=decode(_get(row, "attendance_status", "status_code")),
        learning_progress=_get(row, "learning_progress"),
        page=_get(row, "lamrin_page", "page"),
        line=_get(row, "lamrin_line", "line"),
    )


def normalize_records(rows: Iterable[Any]) -> List[AttendanceRecord]:
    """Converts raw rows, skipping malformed ones so one bad row can't blank a report."""
    records = []
    skipped = 0
    for row in rows:
        if isinstance(row, AttendanceRecord):
            records.append(row)
            continue
        try:
            records.append(to_record(row))
        except (InvalidStatus, ValueError, TypeError) as e:
            skipped += 1
            logger.warning(f"Skipping malformed attendance row {row!r}: {e}")
    if skipped:
        logger.warning(f"Skipped {skipped} malformed attendance row(s)")
    return records
