from datetime import date, datetime, time, timezone
from typing import Optional

from utils.errors import InvalidArgumentError


def utcnow() -> datetime:
    """현재 UTC 시각 (DB 컬럼은 naive UTC 로 저장)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_date(value: Optional[str], field: str = "date") -> Optional[date]:
    """ "YYYY-MM-DD" 문자열 → date (빈 값은 None, 형식 오류는 InvalidArgumentError)"""
    if value is None or str(value).strip() == "":
        return None
    raw = str(value).strip()
    try:
        # "2025-03-01T00:00:00.000Z" 처럼 시각이 붙어 와도 날짜 부분만 사용
        return datetime.strptime(raw[:10], "%Y-%m-%d").date()
    except ValueError:
        raise InvalidArgumentError(f"Invalid {field}: {raw}")


def require_date(value: Optional[str], field: str = "date") -> date:
    parsed = parse_date(value, field)
    if parsed is None:
        raise InvalidArgumentError(f"{field} is required")
    return parsed


def day_start(d: date) -> datetime:
    return datetime.combine(d, time.min)


def day_end(d: date) -> datetime:
    return datetime.combine(d, time.max)
