from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base
from utils.dates import utcnow


class Note(Base):
    __tablename__ = "notes"  # 교직원 개인 메모

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)  # 작성자
    title = Column(String(200), nullable=False)      # 제목
    description = Column(Text)                       # 내용
    date = Column(Date, nullable=False, index=True)  # 메모 날짜
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User")
