import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database.db import get_db
from models.students import Student as StudentModel
from schemas.common import Pagination, make_meta
from schemas.students import StudentCreate, StudentUpdate, Student as StudentSchema
from services.course_service import get_student_or_404
from utils.errors import ConflictError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["students"])


def _student_out(s: StudentModel) -> dict:
    return StudentSchema.model_validate(s).model_dump()


# ✅ [READ] 학생 목록 (이름/학번 검색)
@router.get("/")
def list_students(p: Pagination = Depends(), search: Optional[str] = None, db: Session = Depends(get_db)):
    query = db.query(StudentModel)
    if search:
        like = f"%{search}%"
        query = query.filter(or_(
            StudentModel.student_id.ilike(like),
            StudentModel.last_name.ilike(like),
            StudentModel.first_name.ilike(like),
        ))
    total = query.count()
    students = (
        query.order_by(StudentModel.last_name, StudentModel.first_name, StudentModel.id)
        .offset((p.page - 1) * p.size)
        .limit(p.size)
        .all()
    )
    return {
        "success": True,
        "data": [_student_out(s) for s in students],
        "meta": make_meta(total, p.page, p.size).model_dump(),
    }


# ✅ [CREATE] 학생 등록 (학번 중복 불가)
@router.post("/", status_code=201)
def create_student(payload: StudentCreate, db: Session = Depends(get_db)):
    if db.query(StudentModel).filter(StudentModel.student_id == payload.student_id).first():
        raise ConflictError(f"Student ID already exists: {payload.student_id}")
    student = StudentModel(**payload.model_dump())
    db.add(student)
    db.commit()
    db.refresh(student)
    return {"success": True, "data": _student_out(student), "message": "Student created successfully"}


@router.get("/{student_id}")
def read_student(student_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": _student_out(get_student_or_404(db, student_id))}


@router.put("/{student_id}")
def update_student(student_id: int, updated: StudentUpdate, db: Session = Depends(get_db)):
    student = get_student_or_404(db, student_id)
    changes = updated.model_dump(exclude_unset=True)
    new_number = changes.get("student_id")
    if new_number and new_number != student.student_id:
        if db.query(StudentModel).filter(StudentModel.student_id == new_number).first():
            raise ConflictError(f"Student ID already exists: {new_number}")

    for key, value in changes.items():
        setattr(student, key, value)
    db.commit()
    db.refresh(student)
    return {"success": True, "data": _student_out(student), "message": "Student updated successfully"}


@router.delete("/{student_id}")
def delete_student(student_id: int, db: Session = Depends(get_db)):
    student = get_student_or_404(db, student_id)
    db.delete(student)
    db.commit()
    logger.info("student deleted: %s", student_id)
    return {"success": True, "data": {"student_id": student_id}, "message": "Student deleted successfully"}
