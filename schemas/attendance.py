from typing import List
from pydantic import BaseModel, Field
from datetime import date

from models.attendance import AttendanceStatus


class AttendanceEntry(BaseModel):
    student_id: int                      # 학생 ID
    status: AttendanceStatus             # 출결 상태


# ✅ 출결 저장 요청 (하루치 일괄)
class AttendanceSave(BaseModel):
    date: date                                               # 수업 날짜
    attendance: List[AttendanceEntry] = Field(..., min_length=1)


class Attendance(BaseModel):
    id: int
    student_id: int
    course_id: int
    date: date
    status: AttendanceStatus

    class Config:
        from_attributes = True
