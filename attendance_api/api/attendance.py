from dataclasses import asdict
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from attendance_api.api.deps import (
    get_current_grant,
    get_db,
    get_scope_resolver,
    get_session_locks,
)
from attendance_api.core.exceptions import InvalidParameter, NotFound
from attendance_api.crud import attendance as crud_attendance
from attendance_api.crud.classes import get_class
from attendance_api.schemas.attendance import (
    AttendanceStatsOut,
    ClassSummaryOut,
    SessionSave,
    SessionSaveResponse,
    WeeklyHistoryResponse,
)
from attendance_api.services.history import build_weekly_history, holiday_weeks, missing_weeks
from attendance_api.services.rates import class_summary, latest_session_stats
from attendance_api.services.records import normalize_records, parse_iso_day
from attendance_api.services.scope import ScopeGrant, ScopeResolver, effective_class_ids

router = APIRouter()


def _load_class(db: Session, resolver: ScopeResolver, grant: ScopeGrant, class_id: int):
    resolver.authorize(grant, class_id)
    klass = get_class(db, class_id)
    if klass is None:
        raise NotFound(f"Class {class_id} not found")
    return klass


# Replace the whole roll call of one class on one date
@router.post("/sessions", response_model=SessionSaveResponse)
def save_session(
    payload: SessionSave,
    grant: ScopeGrant = Depends(get_current_grant),
    resolver: ScopeResolver = Depends(get_scope_resolver),
    db: Session = Depends(get_db),
    locks=Depends(get_session_locks),
):
    _load_class(db, resolver, grant, payload.class_id)
    rows = crud_attendance.replace_session(
        db, locks, payload.class_id, payload.date, payload.records,
        learning_progress=payload.learning_progress,
        page=payload.page,
        line=payload.line,
    )
    return {"data": rows}


@router.get("/classes/{class_id}/history", response_model=WeeklyHistoryResponse)
def class_history(
    class_id: int,
    reference_date: Optional[str] = Query(None, alias="referenceDate"),
    grant: ScopeGrant = Depends(get_current_grant),
    resolver: ScopeResolver = Depends(get_scope_resolver),
    db: Session = Depends(get_db),
):
    klass = _load_class(db, resolver, grant, class_id)
    reference = None
    if reference_date:
        try:
            reference = parse_iso_day(reference_date)
        except ValueError:
            raise InvalidParameter(f"referenceDate must be YYYY-MM-DD, got {reference_date!r}")

    records = normalize_records(crud_attendance.get_records(db, class_ids=[class_id]))
    buckets = build_weekly_history(records, klass.class_start_date, reference or date.today())
    return {
        "data": [b.to_dict() for b in buckets],
        "missing_weeks": [b.label for b in missing_weeks(buckets)],
        "holiday_weeks": [b.label for b in holiday_weeks(buckets)],
    }


@router.get("/classes/{class_id}/summary", response_model=ClassSummaryOut)
def class_attendance_summary(
    class_id: int,
    grant: ScopeGrant = Depends(get_current_grant),
    resolver: ScopeResolver = Depends(get_scope_resolver),
    db: Session = Depends(get_db),
):
    _load_class(db, resolver, grant, class_id)
    records = normalize_records(crud_attendance.get_records(db, class_ids=[class_id]))
    summary = class_summary(records)
    return {"class_id": class_id, **asdict(summary)}


# Statistics for the most recent session only
@router.get("/stats", response_model=AttendanceStatsOut)
def attendance_stats(
    class_id: Optional[str] = Query(None, alias="classId"),
    student_id: Optional[int] = Query(None, alias="studentId"),
    grant: ScopeGrant = Depends(get_current_grant),
    resolver: ScopeResolver = Depends(get_scope_resolver),
    db: Session = Depends(get_db),
):
    allowed = resolver.resolve(grant)
    class_ids = effective_class_ids(allowed, class_id)
    if class_ids is not None and not class_ids:
        return latest_session_stats([])
    rows = crud_attendance.get_records(db, class_ids=class_ids, student_id=student_id)
    return latest_session_stats(normalize_records(rows))
