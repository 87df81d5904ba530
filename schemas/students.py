from typing import Optional
from pydantic import BaseModel, Field


# ✅ 입력용 스키마: 학생 등록
class StudentCreate(BaseModel):
    student_id: str = Field(..., min_length=1)     # 학번
    last_name: str = Field(..., min_length=1)      # 성
    first_name: str = Field(..., min_length=1)     # 이름
    middle_initial: Optional[str] = None           # 중간 이니셜
    image: Optional[str] = None                    # 프로필 이미지 URL


class StudentUpdate(BaseModel):
    student_id: Optional[str] = None
    last_name: Optional[str] = None
    first_name: Optional[str] = None
    middle_initial: Optional[str] = None
    image: Optional[str] = None


# ✅ 출력용 스키마
class Student(StudentCreate):
    id: int

    class Config:
        from_attributes = True
