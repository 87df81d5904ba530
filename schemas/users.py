from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from models.users import WorkType, Role, Permission


# ✅ 입력용 스키마: 사용자 생성 (POST)
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)   # 표시 이름
    email: EmailStr                                        # 이메일 (소문자로 정규화)
    department: str = Field(..., min_length=1)             # 소속 학과
    work_type: WorkType                                    # 근무 형태
    role: Role                                             # 역할
    permission: Permission = Permission.GRANTED            # 접근 권한

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v):
        return str(v).strip().lower()


# ✅ 수정용 스키마: 부분 수정 허용 (PUT)
class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    department: Optional[str] = None
    work_type: Optional[WorkType] = None
    role: Optional[Role] = None
    permission: Optional[Permission] = None

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v):
        return str(v).strip().lower() if v is not None else v


# ✅ 출력용 스키마
class User(UserCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
