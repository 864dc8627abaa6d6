from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from attendance_api.api.deps import get_current_grant, get_db, get_scope_resolver, get_settings
from attendance_api.core.config import Settings
from attendance_api.crud.attendance import SqlAttendanceSource
from attendance_api.schemas.attendance import WeeklyReportResponse
from attendance_api.services.reports import WeeklyReportService
from attendance_api.services.scope import ScopeGrant, ScopeResolver

router = APIRouter()


@router.get("/weekly-attendance", response_model=WeeklyReportResponse)
def weekly_attendance(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    class_id: Optional[str] = Query("all", alias="classId"),
    grant: ScopeGrant = Depends(get_current_grant),
    resolver: ScopeResolver = Depends(get_scope_resolver),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    service = WeeklyReportService(resolver, SqlAttendanceSource(db), settings.REPORT_MAX_DAYS)
    buckets = service.run(grant, start_date, end_date, class_id)
    return {"data": [bucket.to_dict() for bucket in buckets]}
