import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from models.notes import Note as NoteModel
from models.users import User as UserModel
from schemas.notes import NoteCreate, NoteUpdate, Note as NoteSchema
from utils.errors import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


def _note_out(n: NoteModel) -> dict:
    data = NoteSchema.model_validate(n).model_dump(mode="json")
    data["created_at"] = n.created_at.isoformat() if n.created_at else None
    data["updated_at"] = n.updated_at.isoformat() if n.updated_at else None
    return data


def _get_note(db: Session, note_id: int) -> NoteModel:
    note = db.query(NoteModel).filter(NoteModel.id == note_id).first()
    if note is None:
        raise NotFoundError("Note not found")
    return note


def _check_user(db: Session, user_id: int):
    if not db.query(UserModel).filter(UserModel.id == user_id).first():
        raise NotFoundError("User not found")


# ✅ [READ] 교직원별 메모 (최근 날짜 순)
@router.get("/")
def list_notes(user_id: int = Query(...), db: Session = Depends(get_db)):
    _check_user(db, user_id)
    notes = (
        db.query(NoteModel)
        .filter(NoteModel.user_id == user_id)
        .order_by(NoteModel.date.desc(), NoteModel.id.desc())
        .all()
    )
    return {"success": True, "data": [_note_out(n) for n in notes]}


# ✅ [CREATE] 메모 작성
@router.post("/", status_code=201)
def create_note(payload: NoteCreate, db: Session = Depends(get_db)):
    _check_user(db, payload.user_id)
    note = NoteModel(**payload.model_dump())
    db.add(note)
    db.commit()
    db.refresh(note)
    logger.info("note %s created for user %s", note.id, note.user_id)
    return {"success": True, "data": _note_out(note), "message": "Note created successfully"}


@router.get("/{note_id}")
def read_note(note_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": _note_out(_get_note(db, note_id))}


@router.put("/{note_id}")
def update_note(note_id: int, updated: NoteUpdate, db: Session = Depends(get_db)):
    note = _get_note(db, note_id)
    for key, value in updated.model_dump(exclude_unset=True).items():
        setattr(note, key, value)
    db.commit()
    db.refresh(note)
    return {"success": True, "data": _note_out(note), "message": "Note updated successfully"}


@router.delete("/{note_id}")
def delete_note(note_id: int, db: Session = Depends(get_db)):
    note = _get_note(db, note_id)
    db.delete(note)
    db.commit()
    return {"success": True, "data": {"note_id": note_id}, "message": "Note deleted successfully"}
