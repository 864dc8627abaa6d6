# attendance_api/crud/attendance.py
import logging
import threading
from contextlib import contextmanager
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from attendance_api.core.exceptions import LookupFailure
from attendance_api.db.models.attendance import ClassAttendance

logger = logging.getLogger(__name__)


class SessionLocks:
    """One lock per (class_id, date); entries are dropped once nobody holds them."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}

    @contextmanager
    def hold(self, class_id: int, day: date):
        key = (class_id, day)
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self):
        with self._guard:
            return len(self._locks)


class SqlAttendanceSource:
    def __init__(self, db: Session):
        self.db = db

    def fetch_rows(self, class_ids, start_date: date, end_date: date):
        """Rows in [start_date, end_date]; class_ids=None means every class."""
        query = self.db.query(ClassAttendance).filter(
            ClassAttendance.attendance_date >= start_date,
            ClassAttendance.attendance_date <= end_date,
        )
        if class_ids is not None:
            query = query.filter(ClassAttendance.class_id.in_(list(class_ids)))
        try:
            return query.all()
        except SQLAlchemyError as e:
            raise LookupFailure("Failed to fetch attendance data") from e


def get_records(db: Session, class_ids=None, student_id=None):
    """All records of the given classes (None = every class), newest first."""
    query = db.query(ClassAttendance)
    if class_ids is not None:
        query = query.filter(ClassAttendance.class_id.in_(list(class_ids)))
    if student_id is not None:
        query = query.filter(ClassAttendance.student_id == student_id)
    try:
        return query.order_by(ClassAttendance.attendance_date.desc()).all()
    except SQLAlchemyError as e:
        raise LookupFailure("Failed to fetch attendance data") from e


def replace_session(db: Session, locks: SessionLocks, class_id: int, day: date,
                    entries, learning_progress=None, page=None, line=None):
    """Replaces every record of (class_id, day) with `entries`.

    Delete and insert run in one transaction while holding the key's lock.
    """
    with locks.hold(class_id, day):
        try:
            deleted = db.query(ClassAttendance).filter(
                ClassAttendance.class_id == class_id,
                ClassAttendance.attendance_date == day,
            ).delete(synchronize_session=False)

            rows = [
                ClassAttendance(
                    class_id=class_id,
                    student_id=entry.student_id,
                    attendance_date=day,
                    attendance_status=int(entry.status),
                    learning_progress=learning_progress,
                    lamrin_page=page,
                    lamrin_line=line,
                )
                for entry in entries
            ]
            db.add_all(rows)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception(f"Failed to save session class={class_id} date={day}")
            raise LookupFailure("Failed to save attendance session") from e

        for row in rows:
            db.refresh(row)

    logger.info(f"Saved session class={class_id} date={day}: "
                f"replaced {deleted} record(s) with {len(rows)}")
    return rows
