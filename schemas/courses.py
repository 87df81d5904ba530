from typing import List, Optional
from pydantic import BaseModel, Field

from models.courses import Semester, CourseStatus


class CourseScheduleCreate(BaseModel):
    day: str = Field(..., min_length=1)                                   # 요일
    from_time: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")              # 시작 (HH:MM)
    to_time: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")                # 종료 (HH:MM)


class CourseSchedule(CourseScheduleCreate):
    id: int
    course_id: int

    class Config:
        from_attributes = True


# ✅ 입력용 스키마: 강좌 생성
class CourseCreate(BaseModel):
    code: str = Field(..., min_length=1)          # 과목 코드
    title: str = Field(..., min_length=1)         # 강좌명
    section: str = Field(..., min_length=1)       # 분반
    room: Optional[str] = None                    # 강의실
    semester: Semester                            # 학기
    academic_year: str = Field(..., min_length=4)  # 학년도
    status: CourseStatus = CourseStatus.ACTIVE
    faculty_id: Optional[int] = None              # 담당 교수 ID
    schedules: List[CourseScheduleCreate] = []


class CourseUpdate(BaseModel):
    code: Optional[str] = None
    title: Optional[str] = None
    section: Optional[str] = None
    room: Optional[str] = None
    semester: Optional[Semester] = None
    academic_year: Optional[str] = None
    status: Optional[CourseStatus] = None
    faculty_id: Optional[int] = None
