"""
services/attendance_service.py

강좌 출결 저장/조회/기간 통계
- 저장은 (학생, 강좌, 날짜) 키 기준 단일 upsert 문 → 동시 제출 시에도 중복 행 없음
- 기간 통계: 기간 내 출결을 기록한 날짜 수(total_classes) 대비 (출석+지각) 비율
"""

import logging
from collections import Counter
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.attendance import Attendance as AttendanceModel, AttendanceStatus
from models.courses import Course as CourseModel
from schemas.attendance import AttendanceSave
from utils.dates import require_date, utcnow
from utils.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def _upsert_statement(dialect: str, rows: List[dict]):
    """DB 종류별 INSERT ... ON CONFLICT / ON DUPLICATE KEY UPDATE"""
    if dialect == "mysql":
        from sqlalchemy.dialects.mysql import insert
        stmt = insert(AttendanceModel).values(rows)
        return stmt.on_duplicate_key_update(
            status=stmt.inserted.status,
            updated_at=stmt.inserted.updated_at,
        )
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise RuntimeError(f"attendance upsert not supported for dialect: {dialect}")
    stmt = insert(AttendanceModel).values(rows)
    return stmt.on_conflict_do_update(
        index_elements=["student_id", "course_id", "date"],
        set_={"status": stmt.excluded.status, "updated_at": stmt.excluded.updated_at},
    )


# ==========================================================
# [1단계] 저장
# ==========================================================

def save_attendance(db: Session, course: CourseModel, payload: AttendanceSave) -> List[AttendanceModel]:
    enrolled = {s.id for s in course.students}
    unknown = sorted({r.student_id for r in payload.attendance} - enrolled)
    if unknown:
        raise InvalidArgumentError(f"Students not enrolled in course: {unknown}")

    # 같은 학생이 요청에 두 번 있으면 마지막 값 사용
    latest = {r.student_id: r.status for r in payload.attendance}
    now = utcnow()
    rows = [
        {
            "student_id": student_id,
            "course_id": course.id,
            "date": payload.date,
            "status": status.value,
            "created_at": now,
            "updated_at": now,
        }
        for student_id, status in latest.items()
    ]

    try:
        db.execute(_upsert_statement(db.get_bind().dialect.name, rows))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("attendance saved: course=%s date=%s records=%d", course.slug, payload.date, len(rows))
    return list_by_date(db, course.id, payload.date)


# ==========================================================
# [2단계] 조회
# ==========================================================

def list_by_date(db: Session, course_id: int, on_date: date) -> List[AttendanceModel]:
    return (
        db.query(AttendanceModel)
        .filter(AttendanceModel.course_id == course_id, AttendanceModel.date == on_date)
        .order_by(AttendanceModel.student_id)
        .all()
    )


def attendance_dates(db: Session, course_id: int) -> List[date]:
    rows = (
        db.query(AttendanceModel.date)
        .filter(AttendanceModel.course_id == course_id)
        .distinct()
        .order_by(AttendanceModel.date.asc())
        .all()
    )
    return [r[0] for r in rows]


def clear_attendance(db: Session, course_id: int, on_date: date) -> int:
    deleted = (
        db.query(AttendanceModel)
        .filter(AttendanceModel.course_id == course_id, AttendanceModel.date == on_date)
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("attendance cleared: course=%s date=%s deleted=%d", course_id, on_date, deleted)
    return deleted


def attendance_to_dict(a: AttendanceModel) -> dict:
    return {
        "id": a.id,
        "student_id": a.student_id,
        "course_id": a.course_id,
        "date": str(a.date),
        "status": a.status.value if isinstance(a.status, AttendanceStatus) else a.status,
    }


# ==========================================================
# [3단계] 통계
# ==========================================================

def attendance_rate(present: int, late: int, total_classes: int) -> float:
    """수업 일수 0이면 0 (0 나누기 방지)"""
    if total_classes <= 0:
        return 0.0
    return (present + late) / total_classes * 100


def range_stats(
    db: Session,
    course: CourseModel,
    start_date: Optional[str],
    end_date: Optional[str],
) -> dict:
    if not start_date or not end_date:
        raise InvalidArgumentError("Start date and end date are required")
    start = require_date(start_date, "startDate")
    end = require_date(end_date, "endDate")
    if start > end:
        raise InvalidArgumentError("startDate must not be after endDate")

    # 기간 내 출결을 기록한 날짜 = 수업 일수
    unique_dates = [
        r[0]
        for r in db.query(AttendanceModel.date)
        .filter(
            AttendanceModel.course_id == course.id,
            AttendanceModel.date >= start,
            AttendanceModel.date <= end,
        )
        .distinct()
        .order_by(AttendanceModel.date.asc())
        .all()
    ]
    total_classes = len(unique_dates)

    # 학생별 상태 건수 (한 번의 GROUP BY 조회)
    counts = (
        db.query(AttendanceModel.student_id, AttendanceModel.status, func.count(AttendanceModel.id))
        .filter(
            AttendanceModel.course_id == course.id,
            AttendanceModel.date >= start,
            AttendanceModel.date <= end,
        )
        .group_by(AttendanceModel.student_id, AttendanceModel.status)
        .all()
    )
    by_student = {}
    for student_id, status, count in counts:
        by_student.setdefault(student_id, Counter())[AttendanceStatus(status)] += count

    student_stats = []
    for student in sorted(course.students, key=lambda s: (s.last_name, s.first_name)):
        c = by_student.get(student.id, Counter())
        present = c[AttendanceStatus.PRESENT]
        late = c[AttendanceStatus.LATE]
        absent = c[AttendanceStatus.ABSENT]
        student_stats.append({
            "student_id": student.id,
            "first_name": student.first_name,
            "last_name": student.last_name,
            "middle_initial": student.middle_initial,
            "present": present,
            "late": late,
            "absent": absent,
            "attendance_rate": round(attendance_rate(present, late, total_classes), 2),
        })

    return {
        "total_classes": total_classes,
        "student_stats": student_stats,
        "unique_dates": [str(d) for d in unique_dates],
    }


def latest_stats(db: Session, course: CourseModel) -> dict:
    """가장 최근 출결일 기준 현황 (기록 없음/NOT_SET 은 결석 처리)"""
    total_students = len(course.students)
    last_date = (
        db.query(func.max(AttendanceModel.date))
        .filter(AttendanceModel.course_id == course.id)
        .scalar()
    )
    if last_date is None:
        return {
            "total_students": total_students,
            "total_present": 0,
            "total_absents": 0,
            "total_late": 0,
            "attendance_rate": 0,
            "last_attendance_date": None,
        }

    status_map = {a.student_id: a.status for a in list_by_date(db, course.id, last_date)}
    present = late = absent = 0
    for student in course.students:
        status = status_map.get(student.id)
        if status == AttendanceStatus.PRESENT:
            present += 1
        elif status == AttendanceStatus.LATE:
            late += 1
        else:
            absent += 1

    rate = (present + late) / total_students * 100 if total_students else 0
    return {
        "total_students": total_students,
        "total_present": present,
        "total_absents": absent,
        "total_late": late,
        "attendance_rate": round(rate, 2),
        "last_attendance_date": str(last_date),
    }
