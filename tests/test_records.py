from datetime import date, datetime

import pytest

from attendance_api.services.records import normalize_records, parse_date, parse_iso_day
from attendance_api.services.status import AttendanceStatus


def test_parse_date_accepts_common_shapes():
    assert parse_date("2024-01-10") == date(2024, 1, 10)
    assert parse_date("2024-01-10T08:30:00+08:00") == date(2024, 1, 10)
    assert parse_date(datetime(2024, 1, 10, 23, 59)) == date(2024, 1, 10)


def test_normalize_maps_store_columns():
    records = normalize_records([{
        "class_id": 3, "student_id": 9, "attendance_date": "2024-01-10",
        "attendance_status": 2, "learning_progress": "Ch 1", "lamrin_page": 4, "lamrin_line": 7,
    }])
    record, = records
    assert record.status == AttendanceStatus.ONLINE
    assert (record.class_id, record.date, record.page, record.line) == (3, date(2024, 1, 10), 4, 7)


def test_malformed_rows_are_skipped_with_warning(caplog):
    rows = [
        {"class_id": 1, "student_id": 1, "attendance_date": "2024-01-10", "attendance_status": 1},
        {"class_id": 1, "student_id": 2, "attendance_date": "10/01/2024", "attendance_status": 1},
        {"class_id": 1, "student_id": 3, "attendance_date": "2024-01-10", "attendance_status": 9},
        {"class_id": 1, "student_id": 4, "attendance_date": None, "attendance_status": 1},
        {"student_id": 5, "attendance_date": "2024-01-10", "attendance_status": 1},
    ]
    with caplog.at_level("WARNING"):
        records = normalize_records(rows)
    assert [r.student_id for r in records] == [1]
    assert "Skipped 4 malformed" in caplog.text


def test_parse_iso_day_is_strict():
    assert parse_iso_day("2024-01-10") == date(2024, 1, 10)
    for bad in ["2024-01-10xyz", "2024-1-9", "2024-01-10T08:30:00", "2024-01-10\n", "2024-02-30", "", None]:
        with pytest.raises(ValueError):
            parse_iso_day(bad)
