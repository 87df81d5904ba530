"""
schemas/common.py

- 프로젝트 전반에서 재사용할 공용 스키마 모음 (Pydantic v2)
  1) 에러 응답 표준: ErrorDetail, ErrorResponse
  2) 목록 페이지네이션: Pagination, MetaInfo, make_meta()
"""

from __future__ import annotations

from datetime import datetime, timezone
from math import ceil
from typing import Any, Optional

from pydantic import BaseModel, Field, ConfigDict


# =========================================================
# 1) 에러 응답 표준
# =========================================================

class ErrorDetail(BaseModel):
    code: str = Field(..., description="에러 식별 코드 (예: NOT_FOUND, INVALID_ARGUMENT)")
    message: str = Field(..., description="사람이 읽을 수 있는 에러 메시지")
    details: Optional[Any] = Field(default=None, description="검증 오류 목록 등 부가 정보")


class ErrorResponse(BaseModel):
    """
    전역 에러 핸들러가 내려주는 표준 에러 응답
    - success 는 항상 False
    """
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 2) 페이지네이션 요청/메타
# =========================================================

class Pagination(BaseModel):
    """
    목록 조회 공통 페이징 파라미터
    - page: 1부터 시작
    - size: 1~200
    - sort: "created_at,desc" / "name,asc"
    """
    page: int = Field(1, ge=1)
    size: int = Field(10, ge=1, le=200)
    sort: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class MetaInfo(BaseModel):
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    size: int = Field(..., ge=1)
    pages: int = Field(..., ge=1)
    sort: Optional[str] = None


def make_meta(total: int, page: int, size: int, sort: Optional[str] = None) -> MetaInfo:
    """total 이 0이어도 pages는 최소 1"""
    pages = max(1, ceil(total / max(1, size)))
    return MetaInfo(total=total, page=page, size=size, pages=pages, sort=sort)
