import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from models.courses import Course as CourseModel
from models.quizzes import Quiz as QuizModel, QuizScore as QuizScoreModel
from schemas.quizzes import QuizCreate, QuizScoresSave
from services.course_service import get_course_or_404
from utils.errors import NotFoundError, InvalidArgumentError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["quizzes"])


def _quiz_out(q: QuizModel) -> dict:
    return {
        "id": q.id,
        "name": q.name,
        "course_id": q.course_id,
        "quiz_date": str(q.quiz_date),
        "max_score": q.max_score,
        "score_count": len(q.scores),
    }


def _score_out(s: QuizScoreModel) -> dict:
    return {
        "id": s.id,
        "quiz_id": s.quiz_id,
        "student_id": s.student_id,
        "score": s.score,
        "attendance": s.attendance,
        "plus_points": s.plus_points,
        "total_grade": s.total_grade,
        "created_at": s.created_at.isoformat() if s.created_at else None,
    }


def _get_quiz(db: Session, quiz_id: int) -> QuizModel:
    quiz = db.query(QuizModel).filter(QuizModel.id == quiz_id).first()
    if quiz is None:
        raise NotFoundError("Quiz not found")
    return quiz


# ==========================================================
# [1단계] 강좌별 퀴즈
# ==========================================================

@router.get("/courses/{course_key}/quizzes")
def list_quizzes(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    quizzes = (
        db.query(QuizModel)
        .filter(QuizModel.course_id == course.id)
        .order_by(QuizModel.quiz_date.desc(), QuizModel.id.desc())
        .all()
    )
    return {"success": True, "data": [_quiz_out(q) for q in quizzes]}


@router.post("/courses/{course_key}/quizzes", status_code=201)
def create_quiz(course_key: str, payload: QuizCreate, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    quiz = QuizModel(course_id=course.id, **payload.model_dump())
    db.add(quiz)
    db.commit()
    db.refresh(quiz)
    return {"success": True, "data": _quiz_out(quiz), "message": "Quiz created successfully"}


# ==========================================================
# [2단계] 단일 퀴즈 / 점수
# ==========================================================

@router.get("/quizzes/{quiz_id}")
def read_quiz(quiz_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": _quiz_out(_get_quiz(db, quiz_id))}


@router.delete("/quizzes/{quiz_id}")
def delete_quiz(quiz_id: int, db: Session = Depends(get_db)):
    quiz = _get_quiz(db, quiz_id)
    db.delete(quiz)
    db.commit()
    return {"success": True, "data": {"quiz_id": quiz_id}, "message": "Quiz deleted successfully"}


@router.get("/quizzes/{quiz_id}/scores")
def list_quiz_scores(quiz_id: int, db: Session = Depends(get_db)):
    quiz = _get_quiz(db, quiz_id)
    scores = sorted(quiz.scores, key=lambda s: s.student_id)
    return {"success": True, "data": [_score_out(s) for s in scores]}


# ✅ [UPSERT] (퀴즈, 학생)당 한 건: 있으면 수정, 없으면 추가
@router.post("/quizzes/{quiz_id}/scores")
def save_quiz_scores(quiz_id: int, payload: QuizScoresSave, db: Session = Depends(get_db)):
    quiz = _get_quiz(db, quiz_id)
    course = db.query(CourseModel).filter(CourseModel.id == quiz.course_id).first()
    enrolled = {s.id for s in course.students}
    unknown = sorted({e.student_id for e in payload.scores} - enrolled)
    if unknown:
        raise InvalidArgumentError(f"Students not enrolled in course: {unknown}")

    existing = {s.student_id: s for s in quiz.scores}
    try:
        for entry in payload.scores:
            values = entry.model_dump(exclude={"student_id"})
            values["attendance"] = entry.attendance.value
            row = existing.get(entry.student_id)
            if row is None:
                row = QuizScoreModel(quiz_id=quiz.id, student_id=entry.student_id, **values)
                db.add(row)
                existing[entry.student_id] = row
            else:
                for key, value in values.items():
                    setattr(row, key, value)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(quiz)
    logger.info("quiz %s scores saved: %d entries", quiz.id, len(payload.scores))
    return {
        "success": True,
        "data": [_score_out(s) for s in sorted(quiz.scores, key=lambda s: s.student_id)],
        "message": "Quiz scores saved successfully",
    }
