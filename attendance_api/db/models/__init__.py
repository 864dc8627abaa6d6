from attendance_api.db.base import Base
from attendance_api.db.models.organization import MainBranch, SubBranch, Classroom, Class
from attendance_api.db.models.attendance import ClassAttendance

__all__ = ["Base", "MainBranch", "SubBranch", "Classroom", "Class", "ClassAttendance"]
