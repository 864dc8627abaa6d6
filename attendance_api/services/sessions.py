# attendance_api/services/sessions.py
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from attendance_api.services.records import AttendanceRecord
from attendance_api.services.status import ATTENDED, AttendanceStatus
from attendance_api.services.weeks import WeekRange, monday_of

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """All records of one class on one date."""

    class_id: int
    date: date
    records: List[AttendanceRecord] = field(default_factory=list)

    @property
    def is_holiday(self) -> bool:
        return bool(self.records) and all(r.is_holiday for r in self.records)

    @property
    def is_mixed(self) -> bool:
        """Holiday and working records in one session. Counted as a normal session."""
        holidays = sum(1 for r in self.records if r.is_holiday)
        return 0 < holidays < len(self.records)

    @property
    def attended(self) -> int:
        if self.is_holiday:
            return 0
        return sum(1 for r in self.records if r.status in ATTENDED)

    def count(self, status: AttendanceStatus) -> int:
        return sum(1 for r in self.records if r.status == status)


def group_sessions(records: Iterable[AttendanceRecord],
                   on_date: Optional[date] = None) -> List[Session]:
    """Groups records by (class, date); sessions come back in date order."""
    grouped: Dict[Tuple[int, date], Session] = {}
    for record in records:
        if on_date is not None and record.date != on_date:
            continue
        key = (record.class_id, record.date)
        if key not in grouped:
            grouped[key] = Session(class_id=record.class_id, date=record.date)
        grouped[key].records.append(record)

    sessions = sorted(grouped.values(), key=lambda s: (s.date, s.class_id))
    for session in sessions:
        if session.is_mixed:
            logger.warning(
                f"Session class={session.class_id} date={session.date} mixes holiday "
                f"and working records; treating it as a working session"
            )
    return sessions


@dataclass
class WeekTally:
    attendance_count: int = 0
    holiday_count: int = 0
    session_count: int = 0
    total_records: int = 0
    present: int = 0
    online: int = 0
    leave: int = 0
    absent: int = 0

    def add(self, session: Session) -> None:
        self.session_count += 1
        if session.is_holiday:
            self.holiday_count += 1
            return
        self.attendance_count += session.attended
        self.total_records += len(session.records)
        self.present += session.count(AttendanceStatus.PRESENT)
        self.online += session.count(AttendanceStatus.ONLINE)
        self.leave += session.count(AttendanceStatus.LEAVE)
        self.absent += session.count(AttendanceStatus.ABSENT)


def tally_weeks(sessions: Iterable[Session],
                weeks: List[WeekRange]) -> List[WeekTally]:
    """One tally per week, matched on the unclipped Monday-Sunday span.

    Sessions outside every week are dropped.
    """
    index = {week.monday: i for i, week in enumerate(weeks)}
    tallies = [WeekTally() for _ in weeks]
    by_monday = defaultdict(list)
    for session in sessions:
        by_monday[monday_of(session.date)].append(session)

    for monday, week_sessions in by_monday.items():
        i = index.get(monday)
        if i is None:
            continue
        for session in week_sessions:
            tallies[i].add(session)
    return tallies
