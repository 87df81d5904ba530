from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


# ==========================================================
# 성적 산출 비율 설정
# ==========================================================
class GradeConfigurationCreate(BaseModel):
    name: str = "Default"                                    # 설정 이름
    reporting_weight: float = Field(..., ge=0, le=100)       # 보고 비중 (%)
    recitation_weight: float = Field(..., ge=0, le=100)      # 암송 비중 (%)
    quiz_weight: float = Field(..., ge=0, le=100)            # 퀴즈 비중 (%)
    passing_threshold: float = Field(..., ge=0, le=100)      # 합격 기준
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_weights(self):
        total = self.reporting_weight + self.recitation_weight + self.quiz_weight
        if abs(total - 100) > 1e-6:
            raise ValueError(f"weights must sum to 100 (got {total:g})")
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class GradeConfiguration(GradeConfigurationCreate):
    id: int
    course_id: int
    version: int

    class Config:
        from_attributes = True


# ==========================================================
# 평가 기준 (보고/암송/조별)
# ==========================================================
class Rubric(BaseModel):
    name: str = Field(..., min_length=1)
    percentage: float = Field(..., ge=0, le=100)


class CriteriaCreate(BaseModel):
    name: str = Field(..., min_length=1)
    user_id: Optional[int] = None                 # 작성 교수
    rubrics: List[Rubric] = Field(..., min_length=1)
    scoring_range: str = "5"
    passing_score: str = "75"
    is_group_criteria: bool = False
    is_recitation_criteria: bool = False

    @model_validator(mode="after")
    def _check_kind(self):
        if self.is_group_criteria and self.is_recitation_criteria:
            raise ValueError("criteria cannot be both group and recitation")
        return self


# ==========================================================
# 채점 기록 저장 (날짜 + 기준별 일괄 교체)
# ==========================================================
class GradeEntry(BaseModel):
    student_id: int
    scores: List[float] = []                       # 루브릭별 점수
    total: float = Field(..., ge=0, le=100)        # 환산 총점


class GradesSave(BaseModel):
    date: date
    criteria_id: int
    grades: List[GradeEntry]


# ==========================================================
# 종합 성적 스냅샷 저장 (호출자가 하위 점수 제공)
# ==========================================================
class GradeScoreSave(BaseModel):
    reporting_score: Optional[float] = Field(default=None, ge=0, le=100)
    recitation_score: Optional[float] = Field(default=None, ge=0, le=100)
    quiz_score: Optional[float] = Field(default=None, ge=0, le=100)
