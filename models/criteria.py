from utils.dates import utcnow

from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base


class Criteria(Base):
    __tablename__ = "criteria"  # 보고/암송/조별 평가 기준표

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)                                                # 평가 기준명
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)  # 강좌 ID
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))                    # 작성 교수
    rubrics = Column(JSON, nullable=False, default=list)            # [{"name": "내용", "percentage": 50}, ...]
    scoring_range = Column(String(20), nullable=False, default="5")  # 루브릭별 최고 점수
    passing_score = Column(String(20), nullable=False, default="75")
    is_group_criteria = Column(Boolean, default=False, nullable=False)
    is_recitation_criteria = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User")

    @property
    def kind(self) -> str:
        if self.is_recitation_criteria:
            return "RECITATION"
        if self.is_group_criteria:
            return "GROUP"
        return "REPORTING"
