# attendance_api/db/models/attendance.py
from sqlalchemy import Column, Integer, String, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from attendance_api.db.base import Base


class ClassAttendance(Base):
    __tablename__ = "class_attendance"
    __table_args__ = (
        UniqueConstraint("class_id", "student_id", "attendance_date",
                         name="uq_class_attendance_student_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
    student_id = Column(Integer, nullable=False)
    attendance_date = Column(Date, nullable=False, index=True)

    # 0 absent, 1 present, 2 online, 3 leave, 4 holiday
    attendance_status = Column(Integer, nullable=False)

    learning_progress = Column(String, nullable=True)
    lamrin_page = Column(Integer, nullable=True)
    lamrin_line = Column(Integer, nullable=True)

    klass = relationship("Class", back_populates="attendance_records")
