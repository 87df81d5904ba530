import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database.db import get_db
from models.courses import Course as CourseModel, CourseSchedule as ScheduleModel, Semester
from models.students import Student as StudentModel
from models.users import User as UserModel
from schemas.common import Pagination, make_meta
from schemas.courses import CourseCreate, CourseUpdate, CourseScheduleCreate
from services.course_service import get_course_or_404, get_student_or_404, make_slug
from utils.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courses", tags=["courses"])


def _student_brief(s: StudentModel) -> dict:
    return {
        "id": s.id,
        "student_id": s.student_id,
        "last_name": s.last_name,
        "first_name": s.first_name,
        "middle_initial": s.middle_initial,
    }


def _course_out(c: CourseModel) -> dict:
    return {
        "id": c.id,
        "slug": c.slug,
        "code": c.code,
        "title": c.title,
        "section": c.section,
        "room": c.room,
        "semester": c.semester.value,
        "academic_year": c.academic_year,
        "status": c.status.value,
        "faculty": (
            {"id": c.faculty.id, "name": c.faculty.name, "email": c.faculty.email, "department": c.faculty.department}
            if c.faculty else None
        ),
        "students": [_student_brief(s) for s in c.students],
        "schedules": [
            {"id": s.id, "day": s.day, "from_time": s.from_time, "to_time": s.to_time}
            for s in c.schedules
        ],
    }


def _check_faculty(db: Session, faculty_id: Optional[int]):
    if faculty_id is not None and not db.query(UserModel).filter(UserModel.id == faculty_id).first():
        raise NotFoundError("Faculty not found")


# ==========================================================
# [1단계] 목록/생성
# ==========================================================

# ✅ [READ] 강좌 목록 (교수/학과/학기/검색 필터)
@router.get("/")
def list_courses(
    p: Pagination = Depends(),
    faculty_id: Optional[int] = None,
    department: Optional[str] = None,
    semester: Optional[Semester] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    query = db.query(CourseModel)
    if faculty_id:
        query = query.filter(CourseModel.faculty_id == faculty_id)
    if department:
        query = query.join(UserModel, UserModel.id == CourseModel.faculty_id).filter(UserModel.department == department)
    if semester:
        query = query.filter(CourseModel.semester == semester)
    if search:
        like = f"%{search}%"
        query = query.filter(or_(
            CourseModel.title.ilike(like),
            CourseModel.code.ilike(like),
            CourseModel.room.ilike(like),
        ))

    total = query.count()
    courses = (
        query.order_by(CourseModel.updated_at.desc(), CourseModel.id.desc())
        .offset((p.page - 1) * p.size)
        .limit(p.size)
        .all()
    )
    return {
        "success": True,
        "data": [_course_out(c) for c in courses],
        "meta": make_meta(total, p.page, p.size).model_dump(),
    }


# ✅ [CREATE] 강좌 추가 (slug = 코드-분반)
@router.post("/", status_code=201)
def create_course(payload: CourseCreate, db: Session = Depends(get_db)):
    _check_faculty(db, payload.faculty_id)
    slug = make_slug(payload.code, payload.section)
    if db.query(CourseModel).filter(CourseModel.slug == slug).first():
        raise ConflictError(f"Course already exists: {slug}")

    data = payload.model_dump(exclude={"schedules"})
    course = CourseModel(slug=slug, **data)
    course.schedules = [ScheduleModel(**s.model_dump()) for s in payload.schedules]
    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info("course created: %s", course.slug)
    return {"success": True, "data": _course_out(course), "message": "Course created successfully"}


# ==========================================================
# [2단계] 단일 강좌
# ==========================================================

@router.get("/{course_key}")
def read_course(course_key: str, db: Session = Depends(get_db)):
    return {"success": True, "data": _course_out(get_course_or_404(db, course_key))}


# ✅ [UPDATE] 강좌 수정 (코드/분반 변경 시 slug 재생성)
@router.put("/{course_key}")
def update_course(course_key: str, updated: CourseUpdate, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    changes = updated.model_dump(exclude_unset=True)
    if "faculty_id" in changes:
        _check_faculty(db, changes["faculty_id"])

    for key, value in changes.items():
        setattr(course, key, value)

    new_slug = make_slug(course.code, course.section)
    if new_slug != course.slug:
        clash = db.query(CourseModel).filter(CourseModel.slug == new_slug, CourseModel.id != course.id).first()
        if clash:
            db.rollback()
            raise ConflictError(f"Course already exists: {new_slug}")
        course.slug = new_slug

    db.commit()
    db.refresh(course)
    return {"success": True, "data": _course_out(course), "message": "Course updated successfully"}


@router.delete("/{course_key}")
def delete_course(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    course_id = course.id
    db.delete(course)
    db.commit()
    logger.info("course deleted: %s", course_id)
    return {"success": True, "data": {"course_id": course_id}, "message": "Course deleted successfully"}


# ==========================================================
# [3단계] 수강생 관리
# ==========================================================

@router.get("/{course_key}/students")
def list_course_students(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    students = sorted(course.students, key=lambda s: (s.last_name, s.first_name))
    return {"success": True, "data": [_student_brief(s) for s in students]}


# ✅ [READ] 아직 수강 등록되지 않은 학생
@router.get("/{course_key}/available-students")
def list_available_students(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    enrolled = [s.id for s in course.students]
    query = db.query(StudentModel)
    if enrolled:
        query = query.filter(StudentModel.id.notin_(enrolled))
    students = query.order_by(StudentModel.last_name, StudentModel.first_name).all()
    return {"success": True, "data": [_student_brief(s) for s in students]}


# ✅ [ENROLL] 수강 등록
@router.post("/{course_key}/students/{student_id}")
def enroll_student(course_key: str, student_id: int, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    student = get_student_or_404(db, student_id)
    if student in course.students:
        raise ConflictError("Student already enrolled in this course")
    course.students.append(student)
    db.commit()
    return {"success": True, "data": _student_brief(student), "message": "Student enrolled successfully"}


# ✅ [UNENROLL] 수강 취소
@router.delete("/{course_key}/students/{student_id}")
def unenroll_student(course_key: str, student_id: int, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    student = get_student_or_404(db, student_id)
    if student not in course.students:
        raise NotFoundError("Student is not enrolled in this course")
    course.students.remove(student)
    db.commit()
    return {"success": True, "data": {"student_id": student_id}, "message": "Student removed from course"}


# ==========================================================
# [4단계] 시간표
# ==========================================================

@router.get("/{course_key}/schedules")
def list_schedules(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    return {
        "success": True,
        "data": [
            {"id": s.id, "day": s.day, "from_time": s.from_time, "to_time": s.to_time}
            for s in course.schedules
        ],
    }


@router.post("/{course_key}/schedules", status_code=201)
def add_schedule(course_key: str, payload: CourseScheduleCreate, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    schedule = ScheduleModel(course_id=course.id, **payload.model_dump())
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    return {
        "success": True,
        "data": {"id": schedule.id, "day": schedule.day, "from_time": schedule.from_time, "to_time": schedule.to_time},
        "message": "Schedule added successfully",
    }
