"""
utils/errors.py

- 서비스 계층에서 발생시키는 도메인 예외 모음
- middlewares/error_handler.py 에서 HTTP 상태 코드/에러 코드로 변환됨
"""


class AppError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    """과목/설정/조 등 대상 리소스 없음 → 404"""
    status_code = 404
    code = "NOT_FOUND"


class InvalidArgumentError(AppError):
    """필수값 누락, 날짜 형식 오류, 범위 초과 → 400"""
    status_code = 400
    code = "INVALID_ARGUMENT"


class ConflictError(AppError):
    """이름/번호/이메일 중복 → 409"""
    status_code = 409
    code = "CONFLICT"
