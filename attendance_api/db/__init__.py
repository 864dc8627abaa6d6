# attendance_api/db/__init__.py
# Importing attendance_api.db registers every model on Base.metadata

from attendance_api.db.base import Base
from attendance_api.db.models import MainBranch, SubBranch, Classroom, Class, ClassAttendance

__all__ = ["Base", "MainBranch", "SubBranch", "Classroom", "Class", "ClassAttendance"]
