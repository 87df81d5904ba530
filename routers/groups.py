import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.db import get_db
from models.groups import Group as GroupModel
from models.students import Student as StudentModel
from schemas.grading import CriteriaCreate
from schemas.groups import GroupCreate
from services import grade_service
from services.course_service import get_course_or_404
from utils.errors import ConflictError, InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courses", tags=["groups"])


def _member(s: StudentModel) -> dict:
    return {
        "id": s.id,
        "first_name": s.first_name,
        "last_name": s.last_name,
        "middle_initial": s.middle_initial,
        "image": s.image,
    }


def _group_out(g: GroupModel) -> dict:
    return {
        "id": g.id,
        "number": g.number,
        "name": g.name,
        "course_id": g.course_id,
        "leader": _member(g.leader) if g.leader else None,
        "students": [_member(s) for s in g.students],
    }


def _get_group(db: Session, course_id: int, group_id: int) -> GroupModel:
    group = (
        db.query(GroupModel)
        .filter(GroupModel.id == group_id, GroupModel.course_id == course_id)
        .first()
    )
    if group is None:
        raise NotFoundError("Group not found")
    return group


def _name_taken(db: Session, course_id: int, name: str) -> bool:
    return db.query(GroupModel).filter(GroupModel.course_id == course_id, GroupModel.name == name).first() is not None


def _number_taken(db: Session, course_id: int, number: int) -> bool:
    return db.query(GroupModel).filter(GroupModel.course_id == course_id, GroupModel.number == number).first() is not None


# ==========================================================
# [1단계] 정적 라우터 (중복 확인)
# ==========================================================

@router.get("/{course_key}/groups/check-name")
def check_group_name(course_key: str, name: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    return {"success": True, "data": {"exists": _name_taken(db, course.id, name)}}


@router.get("/{course_key}/groups/check-number")
def check_group_number(course_key: str, number: int = Query(..., ge=1), db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    return {"success": True, "data": {"exists": _number_taken(db, course.id, number)}}


# ==========================================================
# [2단계] 목록/생성
# ==========================================================

@router.get("/{course_key}/groups")
def list_groups(course_key: str, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    groups = db.query(GroupModel).filter(GroupModel.course_id == course.id).order_by(GroupModel.number).all()
    return {"success": True, "data": [_group_out(g) for g in groups]}


# ✅ [CREATE] 조 생성 (조 이름/번호는 강좌 내 유일, 조원은 수강생만)
@router.post("/{course_key}/groups", status_code=201)
def create_group(course_key: str, payload: GroupCreate, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    if payload.group_name and _name_taken(db, course.id, payload.group_name):
        raise ConflictError("A group with this name already exists")
    if _number_taken(db, course.id, payload.group_number):
        raise ConflictError("A group with this number already exists")

    enrolled = {s.id: s for s in course.students}
    unknown = sorted(set(payload.student_ids) - set(enrolled))
    if unknown:
        raise InvalidArgumentError(f"Students not enrolled in course: {unknown}")
    if payload.leader_id is not None and payload.leader_id not in payload.student_ids:
        raise InvalidArgumentError("Leader must be a member of the group")

    group = GroupModel(
        number=payload.group_number,
        name=payload.group_name,
        course_id=course.id,
        leader_id=payload.leader_id,
    )
    group.students = [enrolled[sid] for sid in dict.fromkeys(payload.student_ids)]
    db.add(group)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("A group with this name or number already exists")
    db.refresh(group)
    logger.info("group %s created for course %s (%d members)", group.number, course.slug, len(group.students))
    return {"success": True, "data": _group_out(group), "message": "Group created successfully"}


# ==========================================================
# [3단계] 단일 조
# ==========================================================

@router.get("/{course_key}/groups/{group_id}")
def read_group(course_key: str, group_id: int, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    return {"success": True, "data": _group_out(_get_group(db, course.id, group_id))}


@router.delete("/{course_key}/groups/{group_id}")
def delete_group(course_key: str, group_id: int, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    group = _get_group(db, course.id, group_id)
    db.delete(group)
    db.commit()
    return {"success": True, "data": {"group_id": group_id}, "message": "Group deleted successfully"}


# ==========================================================
# [4단계] 조별 평가 기준
# ==========================================================

@router.get("/{course_key}/groups/{group_id}/criteria")
def list_group_criteria(course_key: str, group_id: int, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    _get_group(db, course.id, group_id)
    criteria = grade_service.list_criteria(db, course.id, group_only=True)
    return {"success": True, "data": [grade_service.criteria_to_dict(c) for c in criteria]}


# ✅ [CREATE] 조별 기준 생성 (is_group_criteria 고정)
@router.post("/{course_key}/groups/{group_id}/criteria", status_code=201)
def create_group_criteria(course_key: str, group_id: int, payload: CriteriaCreate, db: Session = Depends(get_db)):
    course = get_course_or_404(db, course_key)
    _get_group(db, course.id, group_id)
    criteria = grade_service.create_criteria(db, course, payload, group=True)
    return {"success": True, "data": grade_service.criteria_to_dict(criteria), "message": "Group criteria created"}
