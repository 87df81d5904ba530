"""
services/user_import.py

교직원 계정 일괄 등록 (CSV / XLSX)
- 파일 앞부분에서 "Email" 라벨이 있는 행을 찾아 헤더로 사용
- 행 검증: 필수값, 근무형태/역할/권한 enum 여부
- 10행 단위 배치를 순차 처리, 배치 내부 행은 스레드 풀에서 동시 처리 (행마다 별도 세션)
- 이메일 중복: 기존 이메일 스냅샷 + users.email UNIQUE 제약 위반(IntegrityError)
- 어떤 경우에도 예외를 밖으로 던지지 않고 ImportResult 로 반환
"""

import csv
import io
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from openpyxl import load_workbook
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import SessionLocal
from models.users import User as UserModel, WorkType, Role, Permission
from schemas.user_import import ImportResult, ImportRowError, ImportedUser, ImportFeedback
from utils.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

HEADER_LABEL = "Email"
REQUIRED_COLUMNS = ("Email", "Last Name", "First Name", "Department", "Work Type", "Role", "Permission")
MISSING_FIELDS = "Missing required fields"
DUPLICATE_EMAIL = "Email already exists"


class RowRejected(Exception):
    def __init__(self, message: str, status: str = "error"):
        super().__init__(message)
        self.message = message
        self.status = status


# ==========================================================
# [1단계] 파일 파싱
# ==========================================================

def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def read_table(content: bytes, filename: str) -> List[List[str]]:
    """파일 확장자에 따라 CSV / XLSX 를 2차원 문자열 목록으로 읽음"""
    name = (filename or "").lower()
    if name.endswith(".csv"):
        text = content.decode("utf-8-sig")
        return [[_cell(v) for v in row] for row in csv.reader(io.StringIO(text))]
    if name.endswith(".xlsx"):
        wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        try:
            ws = wb.worksheets[0]
            return [[_cell(v) for v in row] for row in ws.iter_rows(values_only=True)]
        finally:
            wb.close()
    raise InvalidArgumentError("Unsupported file type. Upload a .csv or .xlsx file")


def find_header_row(table: Sequence[Sequence[str]], label: str = HEADER_LABEL, scan_rows: Optional[int] = None) -> int:
    """앞쪽 scan_rows 행 안에서 label 셀이 있는 첫 행 번호"""
    limit = scan_rows or settings.IMPORT_HEADER_SCAN_ROWS
    wanted = label.strip().lower()
    for idx, row in enumerate(table[:limit]):
        if any(cell.strip().lower() == wanted for cell in row):
            return idx
    raise InvalidArgumentError(f"Could not find a header row containing '{label}'")


def rows_to_records(table: Sequence[Sequence[str]]) -> List[Dict[str, str]]:
    """헤더 아래 행들을 {컬럼명: 값} 으로 변환 (빈 행 제외)"""
    header_idx = find_header_row(table)
    header = [h.strip() for h in table[header_idx]]
    records = []
    for row in table[header_idx + 1:]:
        if not any(cell for cell in row):
            continue
        records.append({
            column: (row[i] if i < len(row) else "")
            for i, column in enumerate(header)
            if column
        })
    return records


# ==========================================================
# [2단계] 행 검증
# ==========================================================

def _enum_value(raw: str, enum_cls, field: str, spaces_to_underscore: bool = True):
    key = raw.strip().upper()
    if spaces_to_underscore:
        key = "_".join(key.split())
    try:
        return enum_cls(key)
    except ValueError:
        raise RowRejected(f"Invalid {field}: {raw}")


def parse_row(record: Dict[str, object]) -> dict:
    """검증된 사용자 생성 데이터 (실패 시 RowRejected)"""
    values = {col: _cell(record.get(col)) for col in REQUIRED_COLUMNS}
    if not all(values.values()):
        raise RowRejected(MISSING_FIELDS, status="skipped")

    work_type = _enum_value(values["Work Type"], WorkType, "work type")
    role = _enum_value(values["Role"], Role, "role")
    permission = _enum_value(values["Permission"], Permission, "permission", spaces_to_underscore=False)

    middle = _cell(record.get("Middle Initial"))
    name = f"{values['Last Name']} {values['First Name']}"
    if middle:
        name = f"{name} {middle}"

    return {
        "name": name,
        "email": values["Email"].lower(),
        "department": values["Department"],
        "work_type": work_type,
        "role": role,
        "permission": permission,
    }


# ==========================================================
# [3단계] 일괄 등록
# ==========================================================

class BulkUserImporter:
    def __init__(self, session_factory: Callable[[], Session] = SessionLocal, batch_size: Optional[int] = None):
        self.session_factory = session_factory
        self.batch_size = batch_size or settings.IMPORT_BATCH_SIZE
        self._lock = threading.Lock()
        self._claimed = set()

    def _load_existing_emails(self):
        db = self.session_factory()
        try:
            return {email.lower() for (email,) in db.query(UserModel.email).all()}
        finally:
            db.close()

    def _claim(self, email: str) -> bool:
        # 확인과 점유를 한 번에 (같은 파일 안의 중복 이메일)
        with self._lock:
            if email in self._claimed:
                return False
            self._claimed.add(email)
            return True

    def _release(self, email: str):
        with self._lock:
            self._claimed.discard(email)

    def _create_user(self, data: dict) -> None:
        db = self.session_factory()
        try:
            db.add(UserModel(**data))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _process_row(self, row_number: int, record: Dict[str, object]) -> Tuple[ImportFeedback, Optional[str]]:
        """(행 결과, 등록된 이름)"""
        email = _cell(record.get("Email")).lower() or "N/A"
        try:
            data = parse_row(record)
            if not self._claim(data["email"]):
                raise RowRejected(DUPLICATE_EMAIL, status="skipped")
            try:
                self._create_user(data)
            except IntegrityError:
                # UNIQUE 제약 위반 = 다른 요청이 먼저 등록한 이메일
                raise RowRejected(DUPLICATE_EMAIL, status="skipped")
            except Exception:
                self._release(data["email"])
                raise
        except RowRejected as e:
            logger.info("row %d skipped (%s): %s", row_number, email, e.message)
            return ImportFeedback(row=row_number, email=email, status=e.status, message=e.message), None
        except Exception as e:
            logger.exception("row %d failed (%s)", row_number, email)
            return ImportFeedback(row=row_number, email=email, status="error", message=str(e) or "Failed to create user"), None

        logger.debug("row %d imported: %s", row_number, data["email"])
        return ImportFeedback(row=row_number, email=data["email"], status="imported"), data["name"]

    def run(self, records: List[Dict[str, object]]) -> ImportResult:
        result = ImportResult(total=len(records))
        self._claimed = self._load_existing_emails()
        logger.info("importing %d rows (%d existing users)", len(records), len(self._claimed))

        outcomes: List[Tuple[ImportFeedback, Optional[str]]] = []
        with ThreadPoolExecutor(max_workers=self.batch_size) as pool:
            for start in range(0, len(records), self.batch_size):
                batch = records[start:start + self.batch_size]
                logger.debug(
                    "batch %d of %d",
                    start // self.batch_size + 1,
                    (len(records) + self.batch_size - 1) // self.batch_size,
                )
                futures = [
                    pool.submit(self._process_row, start + offset + 1, record)
                    for offset, record in enumerate(batch)
                ]
                # 배치가 끝나야 다음 배치 시작
                for future in as_completed(futures):
                    outcomes.append(future.result())

        for item, name in sorted(outcomes, key=lambda o: o[0].row):
            result.detailed_feedback.append(item)
            if item.status == "imported":
                result.imported += 1
                result.imported_users.append(ImportedUser(name=name, email=item.email, row=item.row))
            else:
                result.skipped += 1
                result.errors.append(ImportRowError(row=item.row, email=item.email, message=item.message))

        logger.info("import finished: imported=%d skipped=%d", result.imported, result.skipped)
        return result


def import_records(records: List[Dict[str, object]], session_factory: Callable[[], Session] = SessionLocal) -> ImportResult:
    try:
        return BulkUserImporter(session_factory).run(records)
    except Exception as e:
        logger.exception("user import failed")
        return ImportResult.failed(str(e) or "Failed to process import")


def import_file(content: bytes, filename: str, session_factory: Callable[[], Session] = SessionLocal) -> ImportResult:
    """업로드 파일 → 등록 결과 (파일 오류도 결과 객체로 반환)"""
    try:
        records = rows_to_records(read_table(content, filename))
    except InvalidArgumentError as e:
        logger.warning("user import rejected: %s", e.message)
        return ImportResult.failed(e.message)
    except Exception as e:
        logger.exception("could not read import file %s", filename)
        return ImportResult.failed(f"Could not read file: {e}")
    return import_records(records, session_factory)
