import enum
from utils.dates import utcnow

from sqlalchemy import Column, Integer, Date, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base


class AttendanceStatus(str, enum.Enum):
    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    NOT_SET = "NOT_SET"


class Attendance(Base):
    __tablename__ = "attendance"  # 출결 기록 테이블
    # ✅ 학생/강좌/날짜당 한 건 (upsert 키)
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", "date", name="uq_attendance_student_course_date"),
    )

    id = Column(Integer, primary_key=True, index=True)                                          # 출결 고유 ID (PK)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)  # 학생 ID
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)    # 강좌 ID
    date = Column(Date, nullable=False, index=True)                                             # 수업 날짜
    status = Column(Enum(AttendanceStatus, native_enum=False), nullable=False)                  # 출결 상태
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    student = relationship("Student")
