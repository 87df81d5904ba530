import enum
from utils.dates import utcnow

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from database.db import Base


class WorkType(str, enum.Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    FACULTY = "FACULTY"
    ACADEMIC_HEAD = "ACADEMIC_HEAD"


class Permission(str, enum.Enum):
    GRANTED = "GRANTED"
    DENIED = "DENIED"


class User(Base):
    __tablename__ = "users"  # 교직원 계정 테이블

    id = Column(Integer, primary_key=True, index=True)                     # 사용자 고유 ID (PK)
    name = Column(String(150), nullable=False)                             # "성 이름 중간이니셜" 형식
    email = Column(String(150), unique=True, nullable=False, index=True)   # 이메일 (소문자 저장, UNIQUE)
    department = Column(String(100), nullable=False)                       # 소속 학과
    work_type = Column(Enum(WorkType, native_enum=False), nullable=False)  # 근무 형태
    role = Column(Enum(Role, native_enum=False), nullable=False)           # 역할
    permission = Column(Enum(Permission, native_enum=False), nullable=False, default=Permission.GRANTED)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # ✅ 담당 강좌 (1:N)
    courses = relationship("Course", back_populates="faculty")
