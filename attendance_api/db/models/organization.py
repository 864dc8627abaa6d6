# attendance_api/db/models/organization.py
from sqlalchemy import Column, Integer, String, Date, ForeignKey
from sqlalchemy.orm import relationship
from attendance_api.db.base import Base


class MainBranch(Base):
    __tablename__ = "main_branches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)

    sub_branches = relationship("SubBranch", back_populates="main_branch")


class SubBranch(Base):
    __tablename__ = "sub_branches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    main_branch_id = Column(Integer, ForeignKey("main_branches.id"), nullable=True, index=True)

    main_branch = relationship("MainBranch", back_populates="sub_branches")
    classrooms = relationship("Classroom", back_populates="sub_branch")


class Classroom(Base):
    __tablename__ = "classrooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    sub_branch_id = Column(Integer, ForeignKey("sub_branches.id"), nullable=True, index=True)

    sub_branch = relationship("SubBranch", back_populates="classrooms")


class Class(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # Denormalized so scope lookups are a single indexed filter
    main_branch_id = Column(Integer, ForeignKey("main_branches.id"), nullable=True, index=True)
    sub_branch_id = Column(Integer, ForeignKey("sub_branches.id"), nullable=True, index=True)
    classroom_id = Column(Integer, ForeignKey("classrooms.id"), nullable=True, index=True)
    class_start_date = Column(Date, nullable=True)

    attendance_records = relationship("ClassAttendance", back_populates="klass")
