from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from schemas.attendance import AttendanceSave
from services import attendance_service
from services.course_service import get_course_or_404
from utils.dates import require_date

router = APIRouter(prefix="/courses", tags=["attendance"])


# ==========================================================
# [1단계] 날짜별 출결 저장/조회
# ==========================================================

# ✅ [READ] 특정 날짜 출결 (date 없으면 가장 최근 날짜)
@router.get("/{course_key}/attendance")
def read_attendance(
    course_key: str,
    date: Optional[str] = Query(None, description="조회할 날짜 (예: 2025-09-17)"),
    db: Session = Depends(get_db),
):
    course = get_course_or_404(db, course_key)
    if date:
        target = require_date(date, "date")
    else:
        dates = attendance_service.attendance_dates(db, course.id)
        target = dates[-1] if dates else None

    records = attendance_service.list_by_date(db, course.id, target) if target else []
    return {
        "success": True,
        "data": {
            "date": str(target) if target else None,
            "records": [attendance_service.attendance_to_dict(a) for a in records],
        },
    }


# ✅ [SAVE] 하루치 출결 일괄 저장 (학생/날짜당 한 건 유지)
@router.post("/{course_key}/attendance")
def save_attendance(course_key: str, payload: AttendanceSave, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    records = attendance_service.save_attendance(db, course, payload)
    return {
        "success": True,
        "data": [attendance_service.attendance_to_dict(a) for a in records],
        "message": "Attendance saved successfully",
    }


# ==========================================================
# [2단계] 요약/통계
# ==========================================================

@router.get("/{course_key}/attendance/dates")
def read_attendance_dates(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    dates = attendance_service.attendance_dates(db, course.id)
    return {"success": True, "data": [str(d) for d in dates]}


# ✅ [RANGE] 기간별 학생 출석률
@router.get("/{course_key}/attendance/range")
def read_attendance_range(
    course_key: str,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    course = get_course_or_404(db, course_key)
    return {"success": True, "data": attendance_service.range_stats(db, course, start_date, end_date)}


# ✅ [STATS] 가장 최근 수업일 기준 현황
@router.get("/{course_key}/attendance/stats")
def read_attendance_stats(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    return {"success": True, "data": attendance_service.latest_stats(db, course)}


# ✅ [CLEAR] 특정 날짜 출결 삭제
@router.delete("/{course_key}/attendance/clear")
def clear_attendance(course_key: str, date: str = Query(...), db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    deleted = attendance_service.clear_attendance(db, course.id, require_date(date, "date"))
    return {"success": True, "data": {"deleted": deleted}, "message": "Attendance cleared"}
