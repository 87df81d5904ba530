from utils.dates import utcnow

from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base


class GradeScore(Base):
    __tablename__ = "grade_scores"  # 산출된 종합 성적 스냅샷

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    config_id = Column(Integer, ForeignKey("grade_configurations.id", ondelete="CASCADE"), nullable=False)
    config_version = Column(Integer, nullable=False)       # 산출 당시 설정 버전
    reporting_score = Column(Float, nullable=False, default=0)
    recitation_score = Column(Float, nullable=False, default=0)
    quiz_score = Column(Float, nullable=False, default=0)
    total_score = Column(Float, nullable=False)
    remarks = Column(String(20), nullable=False)           # PASSED / FAILED / NO GRADE
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    configuration = relationship("GradeConfiguration")
