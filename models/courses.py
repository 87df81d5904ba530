import enum
from utils.dates import utcnow

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, Table
from sqlalchemy.orm import relationship
from database.db import Base


class Semester(str, enum.Enum):
    FIRST_SEMESTER = "FIRST_SEMESTER"
    SECOND_SEMESTER = "SECOND_SEMESTER"


class CourseStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ARCHIVED = "ARCHIVED"


# ✅ 강좌 ↔ 학생 수강 연결 테이블 (N:M)
course_students = Table(
    "course_students",
    Base.metadata,
    Column("course_id", Integer, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", Integer, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
)


class Course(Base):
    __tablename__ = "courses"  # 강좌 테이블

    id = Column(Integer, primary_key=True, index=True)                       # 강좌 고유 ID (PK)
    code = Column(String(30), nullable=False)                                # 과목 코드 (예: IT 101)
    title = Column(String(200), nullable=False)                              # 강좌명
    section = Column(String(30), nullable=False)                             # 분반
    room = Column(String(50))                                                # 강의실
    semester = Column(Enum(Semester, native_enum=False), nullable=False)     # 학기
    academic_year = Column(String(20), nullable=False)                       # 학년도 (예: 2024-2025)
    status = Column(Enum(CourseStatus, native_enum=False), default=CourseStatus.ACTIVE, nullable=False)
    slug = Column(String(80), unique=True, nullable=False, index=True)       # URL용 식별자 (code-section)
    faculty_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))  # 담당 교수 (FK)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # ==========================================================
    # [관계 설정]
    # ==========================================================
    faculty = relationship("User", back_populates="courses")
    students = relationship("Student", secondary=course_students, back_populates="courses")
    schedules = relationship("CourseSchedule", back_populates="course", cascade="all, delete-orphan")
    grade_configurations = relationship("GradeConfiguration", back_populates="course", cascade="all, delete-orphan")


class CourseSchedule(Base):
    __tablename__ = "course_schedules"  # 강좌 시간표

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    day = Column(String(20), nullable=False)          # 요일 (예: Monday)
    from_time = Column(String(10), nullable=False)    # 시작 시각 (HH:MM)
    to_time = Column(String(10), nullable=False)      # 종료 시각 (HH:MM)

    course = relationship("Course", back_populates="schedules")
