from typing import List, Optional
from pydantic import BaseModel, Field


class GroupCreate(BaseModel):
    group_number: int = Field(..., ge=1)         # 조 번호
    group_name: Optional[str] = None             # 조 이름
    student_ids: List[int] = []                  # 조원 학생 ID
    leader_id: Optional[int] = None              # 조장 학생 ID
