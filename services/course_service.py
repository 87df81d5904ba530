import logging
import re
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.courses import Course as CourseModel
from models.students import Student as StudentModel
from utils.errors import NotFoundError

logger = logging.getLogger(__name__)


def make_slug(code: str, section: str) -> str:
    """ "IT 101", "A" → "it-101-a" """
    raw = f"{code}-{section}".lower()
    return re.sub(r"[^a-z0-9]+", "-", raw).strip("-")


def find_course(db: Session, course_key: str) -> Optional[CourseModel]:
    """슬러그 우선, 숫자면 ID로도 조회"""
    conditions = [CourseModel.slug == course_key]
    if str(course_key).isdigit():
        conditions.append(CourseModel.id == int(course_key))
    return db.query(CourseModel).filter(or_(*conditions)).order_by(CourseModel.id).first()


def get_course_or_404(db: Session, course_key: str) -> CourseModel:
    course = find_course(db, course_key)
    if course is None:
        raise NotFoundError("Course not found")
    return course


def get_student_or_404(db: Session, student_id: int) -> StudentModel:
    student = db.query(StudentModel).filter(StudentModel.id == student_id).first()
    if student is None:
        raise NotFoundError("Student not found")
    return student
