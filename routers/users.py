import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, File, Query, UploadFile
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from models.courses import Course as CourseModel
from models.users import User as UserModel, Role, WorkType
from schemas.common import Pagination, make_meta
from schemas.user_import import ImportResult
from schemas.users import UserCreate, UserUpdate, User as UserSchema
from services import user_import
from utils.errors import NotFoundError, ConflictError, InvalidArgumentError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

SORTABLE = {"name", "email", "department", "created_at", "updated_at"}


def _user_out(user: UserModel) -> dict:
    return UserSchema.model_validate(user).model_dump(mode="json")


def _get_user(db: Session, user_id: int) -> UserModel:
    user = db.query(UserModel).filter(UserModel.id == user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


# ==========================================================
# [1단계] 목록/생성
# ==========================================================

# ✅ [READ] 사용자 목록 (검색/필터/페이징)
@router.get("/")
def list_users(
    p: Pagination = Depends(),
    search: Optional[str] = None,
    role: Optional[Role] = None,
    department: Optional[str] = None,
    db: Session = Depends(get_db),
):
    query = db.query(UserModel)
    if search:
        like = f"%{search}%"
        query = query.filter(or_(
            UserModel.name.ilike(like),
            UserModel.email.ilike(like),
            UserModel.department.ilike(like),
        ))
    if role:
        query = query.filter(UserModel.role == role)
    if department:
        query = query.filter(UserModel.department == department)

    # "name,asc" / "created_at,desc"
    column, _, direction = (p.sort or "name,asc").partition(",")
    if column not in SORTABLE:
        raise InvalidArgumentError(f"Cannot sort by: {column}")
    order = getattr(UserModel, column)
    query = query.order_by(order.desc() if direction.lower() == "desc" else order.asc(), UserModel.id)

    total = query.count()
    users = query.offset((p.page - 1) * p.size).limit(p.size).all()
    return {
        "success": True,
        "data": [_user_out(u) for u in users],
        "meta": make_meta(total, p.page, p.size, p.sort).model_dump(),
        "message": "User list retrieved",
    }


# ✅ [CREATE] 사용자 추가
@router.post("/", status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    if db.query(UserModel).filter(UserModel.email == payload.email).first():
        raise ConflictError("Email already exists")
    user = UserModel(**payload.model_dump())
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already exists")
    db.refresh(user)
    logger.info("user created: %s (%s)", user.email, user.role.value)
    return {"success": True, "data": _user_out(user), "message": "User created successfully"}


# ==========================================================
# [2단계] 일괄 등록 (항상 200 응답)
# ==========================================================

# ✅ [IMPORT] CSV / XLSX 파일 업로드
@router.post("/import", response_model=ImportResult)
def import_users(file: UploadFile = File(...)):
    content = file.file.read()
    if len(content) > settings.MAX_UPLOAD_MB * 1024 * 1024:
        return ImportResult.failed(f"File exceeds {settings.MAX_UPLOAD_MB} MB limit")
    logger.info("user import upload: %s (%d bytes)", file.filename, len(content))
    return user_import.import_file(content, file.filename or "")


# ✅ [IMPORT] 프론트에서 파싱한 행 목록(JSON)
@router.post("/import/json", response_model=ImportResult)
def import_users_json(rows: List[Dict[str, Any]] = Body(...)):
    return user_import.import_records(rows)


# ==========================================================
# [3단계] 정적 조회/통계
# ==========================================================

# ✅ [READ] 이메일로 조회
@router.get("/by-email")
def get_user_by_email(email: str = Query(..., min_length=3), db: Session = Depends(get_db)):
    user = db.query(UserModel).filter(UserModel.email == email.strip().lower()).first()
    if user is None:
        raise NotFoundError("User not found")
    return {"success": True, "data": _user_out(user)}


# ✅ [READ] 교수 목록
@router.get("/faculty")
def list_faculty(department: Optional[str] = None, db: Session = Depends(get_db)):
    query = db.query(UserModel).filter(UserModel.role == Role.FACULTY)
    if department:
        query = query.filter(UserModel.department == department)
    faculty = query.order_by(UserModel.name).all()
    return {"success": True, "data": [_user_out(u) for u in faculty]}


# ✅ [STATS] 근무 형태별 교수 수
@router.get("/faculty-count")
def faculty_count(db: Session = Depends(get_db)):
    rows = (
        db.query(UserModel.work_type, func.count(UserModel.id))
        .filter(UserModel.role == Role.FACULTY)
        .group_by(UserModel.work_type)
        .all()
    )
    counts = {work_type: count for work_type, count in rows}
    return {
        "success": True,
        "data": {
            "full_time": counts.get(WorkType.FULL_TIME, 0),
            "part_time": counts.get(WorkType.PART_TIME, 0),
            "contract": counts.get(WorkType.CONTRACT, 0),
        },
    }


# ==========================================================
# [4단계] 동적 라우터
# ==========================================================

# ✅ [STATS] 특정 교수의 담당 강좌/학생/수업 수
@router.get("/{user_id}/faculty-stats")
def faculty_stats(user_id: int, db: Session = Depends(get_db)):
    user = _get_user(db, user_id)
    courses = db.query(CourseModel).filter(CourseModel.faculty_id == user.id).all()
    student_ids = {s.id for c in courses for s in c.students}
    return {
        "success": True,
        "data": {
            "user_id": user.id,
            "total_students": len(student_ids),
            "total_courses": len(courses),
            "total_classes": sum(len(c.schedules) for c in courses),
        },
    }


@router.get("/{user_id}")
def read_user(user_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": _user_out(_get_user(db, user_id))}


# ✅ [UPDATE] 사용자 정보 수정
@router.put("/{user_id}")
def update_user(user_id: int, updated: UserUpdate, db: Session = Depends(get_db)):
    user = _get_user(db, user_id)
    changes = updated.model_dump(exclude_unset=True)
    if "email" in changes and changes["email"] != user.email:
        if db.query(UserModel).filter(UserModel.email == changes["email"]).first():
            raise ConflictError("Email already exists")

    for key, value in changes.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return {"success": True, "data": _user_out(user), "message": "User updated successfully"}


# ✅ [DELETE] 사용자 삭제
@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user = _get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("user deleted: %s", user_id)
    return {"success": True, "data": {"user_id": user_id}, "message": "User deleted successfully"}
