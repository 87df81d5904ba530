import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from schemas.grading import GradeConfigurationCreate, CriteriaCreate, GradesSave, GradeScoreSave
from services import grade_service
from services.course_service import get_course_or_404, get_student_or_404
from utils.dates import require_date
from utils.errors import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courses", tags=["grades"])


# ==========================================================
# [1단계] 성적 산출 비율 설정 (최근 생성분이 유효)
# ==========================================================

@router.get("/{course_key}/grade-components")
def list_grade_components(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    configs = grade_service.list_configurations(db, course.id)
    return {"success": True, "data": [grade_service.config_to_dict(c) for c in configs]}


@router.get("/{course_key}/grade-components/current")
def read_current_grade_component(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    config = grade_service.require_configuration(db, course.id)
    return {"success": True, "data": grade_service.config_to_dict(config)}


# ✅ [CREATE] 새 설정 (버전 +1, 기존 스냅샷은 is_stale 로 표시됨)
@router.post("/{course_key}/grade-components", status_code=201)
def create_grade_component(course_key: str, payload: GradeConfigurationCreate, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    config = grade_service.create_configuration(db, course, payload)
    return {
        "success": True,
        "data": grade_service.config_to_dict(config),
        "message": "Grade configuration saved",
    }


# ==========================================================
# [2단계] 평가 기준
# ==========================================================

@router.get("/{course_key}/criteria")
def list_criteria(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    return {
        "success": True,
        "data": [grade_service.criteria_to_dict(c) for c in grade_service.list_criteria(db, course.id)],
    }


@router.post("/{course_key}/criteria", status_code=201)
def create_criteria(course_key: str, payload: CriteriaCreate, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    criteria = grade_service.create_criteria(db, course, payload)
    return {"success": True, "data": grade_service.criteria_to_dict(criteria), "message": "Criteria created"}


@router.get("/{course_key}/recitation-criteria")
def list_recitation_criteria(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    criteria = grade_service.list_criteria(db, course.id, recitation_only=True)
    return {"success": True, "data": [grade_service.criteria_to_dict(c) for c in criteria]}


# ==========================================================
# [3단계] 채점 기록 (날짜 + 기준별)
# ==========================================================

@router.get("/{course_key}/grades")
def read_grade_records(
    course_key: str,
    date: str = Query(..., description="채점 날짜 (예: 2025-03-01)"),
    criteria_id: int = Query(...),
    db: Session = Depends(get_db),
):
    course = get_course_or_404(db, course_key)
    records = grade_service.list_grade_records(db, course.id, require_date(date, "date"), criteria_id)
    return {"success": True, "data": [grade_service.grade_to_dict(g) for g in records]}


# ✅ [SAVE] 같은 날짜/기준 기록을 통째로 교체
@router.post("/{course_key}/grades")
def save_grade_records(course_key: str, payload: GradesSave, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    records = grade_service.save_grade_records(db, course, payload)
    return {
        "success": True,
        "data": [grade_service.grade_to_dict(g) for g in records],
        "message": "Grades saved successfully",
    }


# ==========================================================
# [4단계] 학생 종합 성적
# ==========================================================

# ✅ [READ] 기록 기반 즉시 산출 (?from=YYYY-MM-DD&to=YYYY-MM-DD)
@router.get("/{course_key}/students/{student_id}/grades")
def read_student_grade(
    course_key: str,
    student_id: int,
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    db: Session = Depends(get_db),
):
    course = get_course_or_404(db, course_key)
    student = get_student_or_404(db, student_id)
    return {
        "success": True,
        "data": grade_service.aggregate_student_grade(db, course, student, date_from, date_to),
    }


# ✅ [SAVE] 호출자가 준 하위 점수로 스냅샷 저장
@router.post("/{course_key}/students/{student_id}/grades", status_code=201)
def save_student_grade(course_key: str, student_id: int, payload: GradeScoreSave, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    student = get_student_or_404(db, student_id)
    snapshot = grade_service.save_grade_score(db, course, student, payload)
    return {
        "success": True,
        "data": grade_service.grade_score_to_dict(snapshot, snapshot.config_id),
        "message": "Grade saved successfully",
    }


@router.get("/{course_key}/grade-scores")
def list_grade_scores(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    return {"success": True, "data": grade_service.list_grade_scores(db, course)}


# ✅ [READ] 학생의 가장 최근 스냅샷
@router.get("/{course_key}/students/{student_id}/reporting-scores")
def read_reporting_scores(
    course_key: str,
    student_id: int,
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    db: Session = Depends(get_db),
):
    course = get_course_or_404(db, course_key)
    student = get_student_or_404(db, student_id)
    snapshot = grade_service.latest_grade_score(db, course, student, date_from, date_to)
    if snapshot is None:
        raise NotFoundError("No saved grade found for this student")
    latest = grade_service.latest_configuration(db, course.id)
    return {
        "success": True,
        "data": grade_service.grade_score_to_dict(snapshot, latest.id if latest else -1),
    }
