from datetime import date
from typing import List

from pydantic import BaseModel, Field

from models.attendance import AttendanceStatus


class QuizCreate(BaseModel):
    name: str = Field(..., min_length=1)       # 퀴즈명
    quiz_date: date                            # 시행일
    max_score: float = Field(100, gt=0)        # 만점


class QuizScoreEntry(BaseModel):
    student_id: int
    score: float = Field(..., ge=0)
    attendance: AttendanceStatus                 # 응시 당일 출결
    plus_points: float = 0
    total_grade: float = Field(..., ge=0, le=100)  # 환산 점수


class QuizScoresSave(BaseModel):
    scores: List[QuizScoreEntry] = Field(..., min_length=1)
