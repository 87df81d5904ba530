from utils.dates import utcnow

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from database.db import Base
from models.courses import course_students


class Student(Base):
    __tablename__ = "students"  # 학생 기본 정보 테이블

    id = Column(Integer, primary_key=True, index=True)                  # 고유 학생 ID (Primary Key)
    student_id = Column(String(30), unique=True, nullable=False)        # 학번
    last_name = Column(String(100), nullable=False)                     # 성
    first_name = Column(String(100), nullable=False)                    # 이름
    middle_initial = Column(String(5))                                  # 중간 이니셜
    image = Column(String(300))                                         # 프로필 이미지 URL
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # ✅ 수강 강좌 (N:M)
    courses = relationship("Course", secondary=course_students, back_populates="students")

    @property
    def full_name(self) -> str:
        mi = f" {self.middle_initial}." if self.middle_initial else ""
        return f"{self.last_name}, {self.first_name}{mi}"
