from utils.dates import utcnow

from sqlalchemy import Column, Integer, Float, Date, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base


class Grade(Base):
    __tablename__ = "grades"  # 보고/암송 채점 기록

    id = Column(Integer, primary_key=True, index=True)                                          # 성적 고유 ID (PK)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)    # 강좌 ID
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)  # 학생 ID
    criteria_id = Column(Integer, ForeignKey("criteria.id", ondelete="CASCADE"), nullable=False)
    scores = Column(JSON, nullable=False, default=list)    # 루브릭별 점수
    total = Column(Float, nullable=False)                  # 환산 총점 (0~100)
    date = Column(Date, nullable=False, index=True)        # 채점 날짜

    # ✅ 집계 구분 태그: 둘 중 하나만 값이 있음
    reporting_score = Column(Float)                        # 보고(개인/조별) 점수
    recitation_score = Column(Float)                       # 암송 점수
    created_at = Column(DateTime, default=utcnow, nullable=False)

    student = relationship("Student")
    criteria = relationship("Criteria")
