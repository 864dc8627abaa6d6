# attendance_api/services/reports.py
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional, Protocol

from attendance_api.core.exceptions import InvalidRange
from attendance_api.services.history import WeekBucket, assemble_buckets
from attendance_api.services.records import normalize_records, parse_iso_day
from attendance_api.services.scope import (
    ScopeGrant,
    ScopeResolver,
    effective_class_ids,
)
from attendance_api.services.weeks import build_week_ranges

logger = logging.getLogger(__name__)


class AttendanceSource(Protocol):
    def fetch_rows(self, class_ids, start_date: date, end_date: date) -> Iterable:
        ...


def parse_report_range(start, end, max_days: Optional[int] = None):
    if not start or not end:
        raise InvalidRange("startDate and endDate are required")
    try:
        start_date = parse_iso_day(start)
        end_date = parse_iso_day(end)
    except ValueError:
        raise InvalidRange(f"Dates must be YYYY-MM-DD, got {start!r} and {end!r}")
    if start_date > end_date:
        raise InvalidRange("startDate must not be after endDate")
    if max_days is not None and (end_date - start_date).days + 1 > max_days:
        raise InvalidRange(f"Date range is limited to {max_days} days")
    return start_date, end_date


def weekly_report(rows: Iterable, start_date: date, end_date: date) -> List[WeekBucket]:
    """Aggregates already-fetched rows into one bucket per week of the range."""
    weeks = build_week_ranges(start_date, end_date)
    return assemble_buckets(weeks, normalize_records(rows))


class WeeklyReportService:
    """Scope -> fetch -> aggregate for the weekly attendance report."""

    def __init__(self, resolver: ScopeResolver, source: AttendanceSource,
                 max_days: Optional[int] = None):
        self.resolver = resolver
        self.source = source
        self.max_days = max_days

    def run(self, grant: ScopeGrant, start, end, class_id=None) -> List[WeekBucket]:
        allowed = self.resolver.authorize(grant, class_id)
        start_date, end_date = parse_report_range(start, end, self.max_days)

        class_ids = effective_class_ids(allowed, class_id)
        if class_ids is not None and not class_ids:
            logger.info(f"{grant.role.value} {grant.scope_id} has no accessible classes")
            return []

        rows = self.source.fetch_rows(class_ids, start_date, end_date)
        return weekly_report(rows, start_date, end_date)
