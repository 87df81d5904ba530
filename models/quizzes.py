from utils.dates import utcnow

from sqlalchemy import Column, Integer, Float, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base


class Quiz(Base):
    __tablename__ = "quizzes"  # 퀴즈 정보 테이블

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)                                                # 퀴즈명
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)  # 강좌 ID
    quiz_date = Column(Date, nullable=False)                                                  # 시행일
    max_score = Column(Float, nullable=False, default=100)                                   # 만점
    created_at = Column(DateTime, default=utcnow, nullable=False)

    scores = relationship("QuizScore", back_populates="quiz", cascade="all, delete-orphan")


class QuizScore(Base):
    __tablename__ = "quiz_scores"  # 퀴즈 점수 테이블
    __table_args__ = (
        UniqueConstraint("quiz_id", "student_id", name="uq_quiz_scores_quiz_student"),
    )

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    score = Column(Float, nullable=False)                 # 원점수
    attendance = Column(String(20), nullable=False)       # 응시 당일 출결 (PRESENT/LATE/ABSENT)
    plus_points = Column(Float, nullable=False, default=0)
    total_grade = Column(Float, nullable=False)           # 환산 점수 (집계에 사용)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    quiz = relationship("Quiz", back_populates="scores")
