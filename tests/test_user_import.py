import io

import pytest
from openpyxl import Workbook

from models.users import User as UserModel, Role
from services.user_import import find_header_row, parse_row, rows_to_records, RowRejected
from utils.errors import InvalidArgumentError

HEADER = ["Last Name", "First Name", "Middle Initial", "Email", "Department", "Work Type", "Role", "Permission"]


def _csv(rows, title_rows=2) -> bytes:
    lines = [["Faculty Import Template"]] + [[""]] * (title_rows - 1) + [HEADER] + rows
    return "\n".join(",".join(r) for r in lines).encode("utf-8")


def _row(email, role="Faculty", work_type="Full Time", permission="Granted", last="Reyes"):
    return [last, "Maria", "C", email, "IT", work_type, role, permission]


def _upload(client, content, filename="faculty.csv"):
    return client.post("/v1/users/import", files={"file": (filename, content, "text/csv")})


# ==========================================================
# 파싱 단위 테스트
# ==========================================================

def test_header_row_found_below_title_rows():
    table = [["Faculty list"], [""], HEADER, _row("a@school.edu")]
    assert find_header_row(table) == 2
    records = rows_to_records(table)
    assert records[0]["Email"] == "a@school.edu"


def test_missing_header_raises():
    with pytest.raises(InvalidArgumentError):
        find_header_row([["no"], ["header"]])


def test_parse_row_normalises_enums_and_name():
    record = dict(zip(HEADER, _row("MARIA@School.edu", role="academic head", work_type="part time")))
    data = parse_row(record)
    assert data["role"] == Role.ACADEMIC_HEAD
    assert data["email"] == "maria@school.edu"
    assert data["name"] == "Reyes Maria C"


def test_parse_row_rejects_unknown_role():
    record = dict(zip(HEADER, _row("x@school.edu", role="Janitor")))
    with pytest.raises(RowRejected) as exc:
        parse_row(record)
    assert exc.value.message == "Invalid role: Janitor"


# ==========================================================
# 업로드 API
# ==========================================================

def test_import_creates_users(client, db):
    content = _csv([_row("one@school.edu"), _row("two@school.edu", role="Academic Head")])
    res = _upload(client, content)
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["total"] == 2
    assert body["imported"] == 2
    assert [u["row"] for u in body["imported_users"]] == [1, 2]
    assert db.query(UserModel).count() == 2


def test_existing_email_is_skipped(client, db, make_user):
    make_user(email="taken@school.edu")
    res = _upload(client, _csv([_row("Taken@school.edu"), _row("new@school.edu")]))
    body = res.json()
    assert body["imported"] == 1
    assert body["skipped"] == 1
    assert body["errors"] == [{"row": 1, "email": "taken@school.edu", "message": "Email already exists"}]
    assert db.query(UserModel).count() == 2


def test_invalid_role_does_not_create_user(client, db):
    res = _upload(client, _csv([_row("bad@school.edu", role="Janitor")]))
    body = res.json()
    assert body["imported"] == 0
    assert body["errors"][0]["message"] == "Invalid role: Janitor"
    assert db.query(UserModel).count() == 0


def test_duplicate_inside_one_file_imports_once(client, db):
    rows = [_row("dup@school.edu", last=f"Person{i}") for i in range(12)]
    body = _upload(client, _csv(rows)).json()
    assert body["imported"] == 1
    assert body["skipped"] == 11
    assert db.query(UserModel).filter(UserModel.email == "dup@school.edu").count() == 1


def test_missing_fields_skipped(client):
    row = _row("blank@school.edu")
    row[4] = ""
    body = _upload(client, _csv([row])).json()
    assert body["detailed_feedback"][0]["status"] == "skipped"
    assert body["detailed_feedback"][0]["message"] == "Missing required fields"


def test_unsupported_file_still_answers_200(client):
    res = _upload(client, b"whatever", filename="faculty.pdf")
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is False
    assert body["imported"] == 0
    assert body["errors"][0]["row"] == 0


def test_xlsx_upload(client):
    wb = Workbook()
    ws = wb.active
    ws.append(["Faculty Import Template"])
    ws.append(HEADER)
    ws.append(_row("sheet@school.edu"))
    buf = io.BytesIO()
    wb.save(buf)

    res = client.post("/v1/users/import", files={"file": ("faculty.xlsx", buf.getvalue(), "application/octet-stream")})
    body = res.json()
    assert body["imported"] == 1
    assert body["imported_users"][0]["email"] == "sheet@school.edu"


def test_json_import(client):
    record = dict(zip(HEADER, _row("json@school.edu")))
    body = client.post("/v1/users/import/json", json=[record]).json()
    assert body["imported"] == 1
