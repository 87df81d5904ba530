from utils.dates import utcnow

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Table, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base


# ✅ 조 ↔ 학생 연결 테이블 (N:M)
group_students = Table(
    "group_students",
    Base.metadata,
    Column("group_id", Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", Integer, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
)


class Group(Base):
    __tablename__ = "groups"  # 조별 보고 그룹
    __table_args__ = (
        UniqueConstraint("course_id", "number", name="uq_groups_course_number"),
        UniqueConstraint("course_id", "name", name="uq_groups_course_name"),
    )

    id = Column(Integer, primary_key=True, index=True)
    number = Column(Integer, nullable=False)                                                  # 조 번호
    name = Column(String(100))                                                                # 조 이름 (선택)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    leader_id = Column(Integer, ForeignKey("students.id", ondelete="SET NULL"))               # 조장
    created_at = Column(DateTime, default=utcnow, nullable=False)

    students = relationship("Student", secondary=group_students)
    leader = relationship("Student", foreign_keys=[leader_id])
