from typing import List, Literal, Optional
from pydantic import BaseModel


class ImportRowError(BaseModel):
    row: int                 # 1부터 시작하는 데이터 행 번호 (0 = 파일 전체 오류)
    email: str
    message: str


class ImportedUser(BaseModel):
    name: str
    email: str
    row: int


class ImportFeedback(BaseModel):
    row: int
    email: str
    status: Literal["imported", "skipped", "error"]
    message: Optional[str] = None


# ✅ 일괄 등록 결과 (HTTP 상태는 항상 200)
class ImportResult(BaseModel):
    success: bool = True
    total: int = 0
    imported: int = 0
    skipped: int = 0
    errors: List[ImportRowError] = []
    imported_users: List[ImportedUser] = []
    detailed_feedback: List[ImportFeedback] = []

    @classmethod
    def failed(cls, message: str) -> "ImportResult":
        """파일 단위 실패 → 0건 등록 + 가상 오류 1건"""
        return cls(
            success=False,
            errors=[ImportRowError(row=0, email="N/A", message=message)],
        )
