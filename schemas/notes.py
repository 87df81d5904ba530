import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field


# ✅ 입력용 스키마: 메모 작성
class NoteCreate(BaseModel):
    user_id: int                                  # 작성 교직원 ID
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    date: dt.date


class NoteUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    date: Optional[dt.date] = None


# ✅ 출력용 스키마
class Note(NoteCreate):
    id: int

    class Config:
        from_attributes = True
