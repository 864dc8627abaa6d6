# attendance_api/services/status.py
from enum import IntEnum

from attendance_api.core.exceptions import InvalidStatus


class AttendanceStatus(IntEnum):
    """Stored wire values. Renumbering requires a data migration."""

    ABSENT = 0
    PRESENT = 1
    ONLINE = 2
    LEAVE = 3
    HOLIDAY = 4

    @property
    def label(self) -> str:
        return self.name.lower()


ATTENDED = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.ONLINE})


def decode(code) -> AttendanceStatus:
    """Integer status code -> AttendanceStatus. Raises InvalidStatus."""
    # bool is an int subclass; True must not decode as PRESENT
    if isinstance(code, bool) or not isinstance(code, int):
        raise InvalidStatus(f"Status code must be an integer, got {code!r}")
    try:
        return AttendanceStatus(code)
    except ValueError:
        raise InvalidStatus(f"Unknown status code: {code}")


def encode(status) -> int:
    """AttendanceStatus or its label ("present", ...) -> integer code."""
    if isinstance(status, AttendanceStatus):
        return int(status)
    if isinstance(status, str):
        try:
            return int(AttendanceStatus[status.strip().upper()])
        except KeyError:
            pass
    raise InvalidStatus(f"Unknown status: {status!r}")


def label_of(code) -> str:
    return decode(code).label
