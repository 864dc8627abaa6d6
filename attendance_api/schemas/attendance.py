from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date
from typing import List, Optional

from attendance_api.services.status import AttendanceStatus


class AttendanceEntry(BaseModel):
    student_id: int
    status: AttendanceStatus  # 0 absent, 1 present, 2 online, 3 leave, 4 holiday


class SessionSave(BaseModel):
    class_id: int
    date: date
    learning_progress: Optional[str] = None
    page: Optional[int] = None
    line: Optional[int] = None
    records: List[AttendanceEntry] = Field(min_length=1)

    @field_validator("records")
    @classmethod
    def _one_record_per_student(cls, v):
        seen = set()
        for entry in v:
            if entry.student_id in seen:
                raise ValueError(f"student {entry.student_id} appears more than once")
            seen.add(entry.student_id)
        return v


class AttendanceOut(BaseModel):
    id: int
    class_id: int
    student_id: int
    attendance_date: date
    attendance_status: int
    learning_progress: Optional[str] = None
    lamrin_page: Optional[int] = None
    lamrin_line: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class SessionSaveResponse(BaseModel):
    data: List[AttendanceOut]


class WeekBucketOut(BaseModel):
    week_start: date
    week_end: date
    label: str
    attendance_count: int
    is_missing: bool
    is_holiday: bool
    holiday_count: int
    present: int
    online: int
    leave: int
    absent: int
    total_records: int

    model_config = ConfigDict(from_attributes=True)


class WeeklyReportResponse(BaseModel):
    data: List[WeekBucketOut]


class WeeklyHistoryResponse(BaseModel):
    data: List[WeekBucketOut]
    missing_weeks: List[str]
    holiday_weeks: List[str]


class ClassSummaryOut(BaseModel):
    class_id: int
    learning_progress: Optional[str] = None
    page: Optional[int] = None
    line: Optional[int] = None
    attendance_rate: int
    latest_date: Optional[date] = None


class AttendanceStatsOut(BaseModel):
    total: int
    present: int
    online: int
    leave: int
    absent: int
    holiday: int
    attendance_rate: int
    latest_date: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)
