from datetime import date

from attendance_api.services.rates import (
    attendance_rate,
    class_summary,
    latest_session_rate,
    latest_session_stats,
)
from attendance_api.services.records import AttendanceRecord
from attendance_api.services.status import AttendanceStatus as S


def rec(status, day=date(2024, 1, 10), student_id=1, **kw):
    return AttendanceRecord(class_id=1, student_id=student_id, date=day, status=status, **kw)


def test_rate_over_whole_history():
    records = ([rec(S.PRESENT)] * 6 + [rec(S.ONLINE)] + [rec(S.ABSENT)] * 2 + [rec(S.LEAVE)]
               + [rec(S.HOLIDAY)] * 4)
    assert attendance_rate(records) == 70


def test_rate_is_zero_without_working_records():
    assert attendance_rate([]) == 0
    assert attendance_rate([rec(S.HOLIDAY)] * 3) == 0


def test_rate_rounds_half_up():
    # 1/8 = 12.5%
    assert attendance_rate([rec(S.PRESENT)] + [rec(S.ABSENT)] * 7) == 13
    # 2/3 = 66.67%
    assert attendance_rate([rec(S.PRESENT)] * 2 + [rec(S.ABSENT)]) == 67


def test_rate_stays_within_bounds():
    statuses = list(S)
    for n in range(1, 12):
        records = [rec(statuses[(i * 7 + n) % 5]) for i in range(n)]
        assert 0 <= attendance_rate(records) <= 100


def test_latest_session_rate_uses_only_latest_date():
    records = [
        rec(S.ABSENT, date(2024, 1, 3)),
        rec(S.ABSENT, date(2024, 1, 3), student_id=2),
        rec(S.PRESENT, date(2024, 1, 10)),
        rec(S.LEAVE, date(2024, 1, 10), student_id=2),
    ]
    assert latest_session_rate(records) == 50
    assert latest_session_rate([]) == 0


def test_class_summary_takes_progress_from_latest_session():
    records = [
        rec(S.PRESENT, date(2024, 1, 3), learning_progress="Chapter 1", page=3, line=1),
        rec(S.PRESENT, date(2024, 1, 10), learning_progress="Chapter 2", page=9, line=5),
        rec(S.ABSENT, date(2024, 1, 10), student_id=2, learning_progress="Chapter 2", page=9, line=5),
    ]
    summary = class_summary(records)
    assert summary.learning_progress == "Chapter 2"
    assert (summary.page, summary.line) == (9, 5)
    assert summary.latest_date == date(2024, 1, 10)
    assert summary.attendance_rate == 67


def test_class_summary_without_records():
    summary = class_summary([])
    assert summary.latest_date is None
    assert summary.attendance_rate == 0
    assert summary.learning_progress is None


def test_latest_session_stats():
    stats = latest_session_stats([
        rec(S.PRESENT, date(2024, 1, 3)),
        rec(S.PRESENT, date(2024, 1, 10)),
        rec(S.ONLINE, date(2024, 1, 10), student_id=2),
        rec(S.HOLIDAY, date(2024, 1, 10), student_id=3),
        rec(S.ABSENT, date(2024, 1, 10), student_id=4),
    ])
    assert (stats.total, stats.present, stats.online, stats.holiday, stats.absent) == (4, 1, 1, 1, 1)
    assert stats.attendance_rate == 67
    assert stats.latest_date == date(2024, 1, 10)
