from utils.dates import utcnow

from sqlalchemy import Column, Integer, Float, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base


class GradeConfiguration(Base):
    __tablename__ = "grade_configurations"  # 강좌별 성적 산출 비율 설정

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False, default="Default")    # 설정 이름 (예: Midterm)
    version = Column(Integer, nullable=False, default=1)             # 강좌 내 설정 버전 (1부터 증가)
    reporting_weight = Column(Float, nullable=False)                 # 보고 비중 (%)
    recitation_weight = Column(Float, nullable=False)                # 암송 비중 (%)
    quiz_weight = Column(Float, nullable=False)                      # 퀴즈 비중 (%)
    passing_threshold = Column(Float, nullable=False)                # 합격 기준 점수 (0~100)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    course = relationship("Course", back_populates="grade_configurations")
