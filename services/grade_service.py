"""
services/grade_service.py

종합 성적 산출 (보고 + 암송 + 퀴즈 가중 합산)
- compute_composite(): 순수 함수. 조회(GET)/저장(POST) 두 경로가 모두 이 함수만 사용
- aggregate_student_grade(): 기록 조회 → 항목별 평균 → 가중합 → 합격 여부
- save_grade_score(): 호출자가 준 하위 점수로 스냅샷 저장 (설정 ID + 버전 기록)
- 설정은 항상 "가장 최근에 만든 것"이 유효
"""

import logging
from datetime import date
from typing import Iterable, List, Optional

from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from models.courses import Course as CourseModel
from models.criteria import Criteria as CriteriaModel
from models.grades import Grade as GradeModel
from models.grade_configurations import GradeConfiguration as ConfigModel
from models.grade_scores import GradeScore as GradeScoreModel
from models.quizzes import Quiz as QuizModel, QuizScore as QuizScoreModel
from models.students import Student as StudentModel
from schemas.grading import GradeConfigurationCreate, GradesSave, GradeScoreSave
from utils.dates import parse_date, day_start, day_end
from utils.errors import NotFoundError, InvalidArgumentError

logger = logging.getLogger(__name__)

PASSED = "PASSED"
FAILED = "FAILED"
NO_GRADE = "NO GRADE"


class Composite(BaseModel):
    reporting_score: float
    recitation_score: float
    quiz_score: float
    total_score: float
    remarks: str


# ==========================================================
# [1단계] 순수 계산
# ==========================================================

def mean(values: Iterable[float]) -> Optional[float]:
    """빈 목록이면 None (0점과 '기록 없음'을 구분)"""
    values = list(values)
    if not values:
        return None
    return sum(values) / len(values)


def compute_composite(
    config,
    reporting: Optional[float],
    recitation: Optional[float],
    quiz: Optional[float],
) -> Composite:
    """
    total = 보고*보고비중/100 + 암송*암송비중/100 + 퀴즈*퀴즈비중/100
    - 세 점수가 모두 None(기록 전무)이면 NO GRADE
    - 그 외 None 은 0점으로 취급
    - total >= 기준점 → PASSED (경계값 포함)
    """
    if reporting is None and recitation is None and quiz is None:
        return Composite(
            reporting_score=0, recitation_score=0, quiz_score=0,
            total_score=0, remarks=NO_GRADE,
        )

    r = reporting or 0.0
    rc = recitation or 0.0
    q = quiz or 0.0
    total = (
        r * config.reporting_weight / 100
        + rc * config.recitation_weight / 100
        + q * config.quiz_weight / 100
    )
    # 부동소수 오차로 경계값(=기준점)이 FAILED 되지 않도록 반올림 후 비교
    total = round(total, 4)
    remarks = PASSED if total >= config.passing_threshold else FAILED
    return Composite(
        reporting_score=r, recitation_score=rc, quiz_score=q,
        total_score=total, remarks=remarks,
    )


# ==========================================================
# [2단계] 성적 산출 설정
# ==========================================================

def latest_configuration(db: Session, course_id: int) -> Optional[ConfigModel]:
    return (
        db.query(ConfigModel)
        .filter(ConfigModel.course_id == course_id)
        .order_by(ConfigModel.created_at.desc(), ConfigModel.id.desc())
        .first()
    )


def require_configuration(db: Session, course_id: int) -> ConfigModel:
    config = latest_configuration(db, course_id)
    if config is None:
        raise NotFoundError("No grade configuration found")
    return config


def list_configurations(db: Session, course_id: int) -> List[ConfigModel]:
    return (
        db.query(ConfigModel)
        .filter(ConfigModel.course_id == course_id)
        .order_by(ConfigModel.created_at.desc(), ConfigModel.id.desc())
        .all()
    )


def create_configuration(db: Session, course: CourseModel, payload: GradeConfigurationCreate) -> ConfigModel:
    last_version = (
        db.query(func.max(ConfigModel.version))
        .filter(ConfigModel.course_id == course.id)
        .scalar()
    )
    config = ConfigModel(
        course_id=course.id,
        version=(last_version or 0) + 1,
        **payload.model_dump(),
    )
    db.add(config)
    db.commit()
    db.refresh(config)
    logger.info("grade configuration v%s created for course %s", config.version, course.slug)
    return config


def config_to_dict(config: ConfigModel) -> dict:
    return {
        "id": config.id,
        "course_id": config.course_id,
        "name": config.name,
        "version": config.version,
        "reporting_weight": config.reporting_weight,
        "recitation_weight": config.recitation_weight,
        "quiz_weight": config.quiz_weight,
        "passing_threshold": config.passing_threshold,
        "start_date": str(config.start_date),
        "end_date": str(config.end_date),
        "created_at": config.created_at.isoformat() if config.created_at else None,
    }


# ==========================================================
# [3단계] 평가 기준 / 채점 기록
# ==========================================================

def create_criteria(db: Session, course: CourseModel, payload, group: bool = False) -> CriteriaModel:
    """group=True 이면 조별 기준으로 고정 (암송 여부는 무시)"""
    criteria = CriteriaModel(
        course_id=course.id,
        name=payload.name,
        user_id=payload.user_id,
        rubrics=[r.model_dump() for r in payload.rubrics],
        scoring_range=payload.scoring_range,
        passing_score=payload.passing_score,
        is_group_criteria=group or payload.is_group_criteria,
        is_recitation_criteria=False if group else payload.is_recitation_criteria,
    )
    db.add(criteria)
    db.commit()
    db.refresh(criteria)
    return criteria


def list_criteria(
    db: Session,
    course_id: int,
    recitation_only: bool = False,
    group_only: bool = False,
) -> List[CriteriaModel]:
    query = db.query(CriteriaModel).filter(CriteriaModel.course_id == course_id)
    if recitation_only:
        query = query.filter(CriteriaModel.is_recitation_criteria.is_(True))
    if group_only:
        query = query.filter(CriteriaModel.is_group_criteria.is_(True))
    return query.order_by(CriteriaModel.created_at.desc(), CriteriaModel.id.desc()).all()


def criteria_to_dict(c: CriteriaModel) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "course_id": c.course_id,
        "user_id": c.user_id,
        "rubrics": c.rubrics,
        "scoring_range": c.scoring_range,
        "passing_score": c.passing_score,
        "is_group_criteria": c.is_group_criteria,
        "is_recitation_criteria": c.is_recitation_criteria,
        "kind": c.kind,
    }


def _get_criteria(db: Session, course_id: int, criteria_id: int) -> CriteriaModel:
    criteria = (
        db.query(CriteriaModel)
        .filter(CriteriaModel.id == criteria_id, CriteriaModel.course_id == course_id)
        .first()
    )
    if criteria is None:
        raise NotFoundError("Criteria not found")
    return criteria


def save_grade_records(db: Session, course: CourseModel, payload: GradesSave) -> List[GradeModel]:
    """
    같은 날짜 + 기준의 기존 기록을 지우고 새로 저장 (한 트랜잭션)
    - 기준 종류에 따라 reporting_score / recitation_score 중 하나에 점수 태그
    """
    criteria = _get_criteria(db, course.id, payload.criteria_id)
    enrolled = {s.id for s in course.students}
    unknown = [g.student_id for g in payload.grades if g.student_id not in enrolled]
    if unknown:
        raise InvalidArgumentError(f"Students not enrolled in course: {unknown}")

    is_recitation = criteria.is_recitation_criteria
    try:
        (
            db.query(GradeModel)
            .filter(
                GradeModel.course_id == course.id,
                GradeModel.criteria_id == criteria.id,
                GradeModel.date == payload.date,
            )
            .delete(synchronize_session=False)
        )
        records = []
        for entry in payload.grades:
            record = GradeModel(
                course_id=course.id,
                student_id=entry.student_id,
                criteria_id=criteria.id,
                scores=list(entry.scores),
                total=entry.total,
                date=payload.date,
                reporting_score=None if is_recitation else entry.total,
                recitation_score=entry.total if is_recitation else None,
            )
            db.add(record)
            records.append(record)
        db.commit()
    except Exception:
        db.rollback()
        raise

    for record in records:
        db.refresh(record)
    logger.info(
        "saved %d %s grades for course %s on %s",
        len(records), criteria.kind.lower(), course.slug, payload.date,
    )
    return records


def list_grade_records(db: Session, course_id: int, on_date: date, criteria_id: int) -> List[GradeModel]:
    return (
        db.query(GradeModel)
        .filter(
            GradeModel.course_id == course_id,
            GradeModel.criteria_id == criteria_id,
            GradeModel.date == on_date,
        )
        .all()
    )


def grade_to_dict(g: GradeModel) -> dict:
    return {
        "id": g.id,
        "student_id": g.student_id,
        "criteria_id": g.criteria_id,
        "scores": g.scores,
        "total": g.total,
        "date": str(g.date),
        "reporting_score": g.reporting_score,
        "recitation_score": g.recitation_score,
    }


# ==========================================================
# [4단계] 학생 종합 성적 (조회 시 산출)
# ==========================================================

def _date_range(date_from: Optional[str], date_to: Optional[str]):
    start = parse_date(date_from, "from")
    end = parse_date(date_to, "to")
    if start and end and start > end:
        raise InvalidArgumentError("'from' must not be after 'to'")
    return start, end


def aggregate_student_grade(
    db: Session,
    course: CourseModel,
    student: StudentModel,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> dict:
    start, end = _date_range(date_from, date_to)
    config = require_configuration(db, course.id)

    # 1) 보고/암송 채점 기록
    grade_query = db.query(GradeModel).filter(
        GradeModel.course_id == course.id,
        GradeModel.student_id == student.id,
    )
    if start:
        grade_query = grade_query.filter(GradeModel.date >= start)
    if end:
        grade_query = grade_query.filter(GradeModel.date <= end)
    grades = grade_query.order_by(GradeModel.date.desc()).all()

    reporting_grades = [g for g in grades if g.reporting_score is not None]
    recitation_grades = [g for g in grades if g.recitation_score is not None]

    # 2) 퀴즈 점수 (퀴즈 → 강좌 관계로 필터, 생성 시각 기준 기간)
    quiz_query = (
        db.query(QuizScoreModel)
        .join(QuizModel, QuizModel.id == QuizScoreModel.quiz_id)
        .filter(QuizModel.course_id == course.id, QuizScoreModel.student_id == student.id)
    )
    if start:
        quiz_query = quiz_query.filter(QuizScoreModel.created_at >= day_start(start))
    if end:
        quiz_query = quiz_query.filter(QuizScoreModel.created_at <= day_end(end))
    quiz_scores = quiz_query.order_by(QuizScoreModel.created_at.desc()).all()

    composite = compute_composite(
        config,
        mean(g.total for g in reporting_grades),
        mean(g.total for g in recitation_grades),
        mean(q.total_grade for q in quiz_scores),
    )
    logger.debug(
        "course=%s student=%s range=%s~%s total=%.2f remarks=%s",
        course.slug, student.id, start, end, composite.total_score, composite.remarks,
    )

    return {
        "course_id": course.id,
        "student_id": student.id,
        **composite.model_dump(),
        "grade_details": {
            "reporting_grades": len(reporting_grades),
            "recitation_grades": len(recitation_grades),
            "quiz_grades": len(quiz_scores),
        },
        "configuration": config_to_dict(config),
        "raw_grades": [grade_to_dict(g) for g in grades],
        "raw_quiz_scores": [
            {
                "id": q.id,
                "quiz_id": q.quiz_id,
                "total_grade": q.total_grade,
                "created_at": q.created_at.isoformat(),
            }
            for q in quiz_scores
        ],
    }


# ==========================================================
# [5단계] 종합 성적 스냅샷 (호출자 제공 점수)
# ==========================================================

def save_grade_score(
    db: Session,
    course: CourseModel,
    student: StudentModel,
    payload: GradeScoreSave,
) -> GradeScoreModel:
    config = require_configuration(db, course.id)
    composite = compute_composite(
        config, payload.reporting_score, payload.recitation_score, payload.quiz_score,
    )
    snapshot = GradeScoreModel(
        course_id=course.id,
        student_id=student.id,
        config_id=config.id,
        config_version=config.version,
        **composite.model_dump(),
    )
    db.add(snapshot)
    db.commit()
    db.refresh(snapshot)
    logger.info(
        "grade snapshot saved: course=%s student=%s config v%s total=%.2f",
        course.slug, student.id, config.version, snapshot.total_score,
    )
    return snapshot


def grade_score_to_dict(score: GradeScoreModel, latest_config_id: Optional[int] = None) -> dict:
    data = {
        "id": score.id,
        "course_id": score.course_id,
        "student_id": score.student_id,
        "config_id": score.config_id,
        "config_version": score.config_version,
        "reporting_score": score.reporting_score,
        "recitation_score": score.recitation_score,
        "quiz_score": score.quiz_score,
        "total_score": score.total_score,
        "remarks": score.remarks,
        "created_at": score.created_at.isoformat() if score.created_at else None,
    }
    if latest_config_id is not None:
        # ✅ 최신 설정이 아닌 설정으로 산출된 스냅샷
        data["is_stale"] = score.config_id != latest_config_id
    return data


def list_grade_scores(db: Session, course: CourseModel) -> List[dict]:
    latest = latest_configuration(db, course.id)
    scores = (
        db.query(GradeScoreModel)
        .filter(GradeScoreModel.course_id == course.id)
        .order_by(GradeScoreModel.created_at.desc(), GradeScoreModel.id.desc())
        .all()
    )
    latest_id = latest.id if latest else -1
    return [grade_score_to_dict(s, latest_id) for s in scores]


def latest_grade_score(
    db: Session,
    course: CourseModel,
    student: StudentModel,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> Optional[GradeScoreModel]:
    start, end = _date_range(date_from, date_to)
    query = db.query(GradeScoreModel).filter(
        GradeScoreModel.course_id == course.id,
        GradeScoreModel.student_id == student.id,
    )
    if start:
        query = query.filter(GradeScoreModel.created_at >= day_start(start))
    if end:
        query = query.filter(GradeScoreModel.created_at <= day_end(end))
    return query.order_by(GradeScoreModel.created_at.desc(), GradeScoreModel.id.desc()).first()
