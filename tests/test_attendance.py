from models.attendance import Attendance as AttendanceModel
from services.attendance_service import attendance_rate


def _save(client, slug, day, entries):
    return client.post(f"/v1/courses/{slug}/attendance", json={
        "date": day,
        "attendance": [{"student_id": sid, "status": status} for sid, status in entries],
    })


def test_rate_is_zero_without_classes():
    assert attendance_rate(0, 0, 0) == 0
    assert attendance_rate(3, 1, 4) == 100


def test_saving_twice_updates_instead_of_duplicating(client, db, make_course, make_student):
    student = make_student()
    course = make_course(students=[student])

    assert _save(client, course.slug, "2025-03-03", [(student.id, "ABSENT")]).status_code == 200
    res = _save(client, course.slug, "2025-03-03", [(student.id, "LATE")])
    assert res.status_code == 200
    assert [r["status"] for r in res.json()["data"]] == ["LATE"]

    rows = db.query(AttendanceModel).filter(AttendanceModel.course_id == course.id).all()
    assert len(rows) == 1


def test_unenrolled_student_rejected(client, make_course, make_student):
    course = make_course()
    outsider = make_student()
    res = _save(client, course.slug, "2025-03-03", [(outsider.id, "PRESENT")])
    assert res.status_code == 400


def test_range_stats(client, make_course, make_student):
    ana = make_student(last_name="Aquino", first_name="Ana")
    ben = make_student(last_name="Bautista", first_name="Ben")
    course = make_course(students=[ana, ben])

    _save(client, course.slug, "2025-03-03", [(ana.id, "PRESENT"), (ben.id, "ABSENT")])
    _save(client, course.slug, "2025-03-05", [(ana.id, "LATE"), (ben.id, "PRESENT")])
    _save(client, course.slug, "2025-03-10", [(ana.id, "ABSENT"), (ben.id, "PRESENT")])

    res = client.get(
        f"/v1/courses/{course.slug}/attendance/range",
        params={"startDate": "2025-03-01", "endDate": "2025-03-07"},
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["total_classes"] == 2
    assert data["unique_dates"] == ["2025-03-03", "2025-03-05"]

    stats = {s["student_id"]: s for s in data["student_stats"]}
    assert stats[ana.id]["present"] == 1
    assert stats[ana.id]["late"] == 1
    assert stats[ana.id]["attendance_rate"] == 100
    assert stats[ben.id]["absent"] == 1
    assert stats[ben.id]["attendance_rate"] == 50


def test_range_requires_both_dates(client, make_course):
    course = make_course()
    res = client.get(f"/v1/courses/{course.slug}/attendance/range", params={"startDate": "2025-03-01"})
    assert res.status_code == 400


def test_range_without_classes_has_zero_rate(client, make_course, make_student):
    student = make_student()
    course = make_course(students=[student])
    data = client.get(
        f"/v1/courses/{course.slug}/attendance/range",
        params={"startDate": "2025-03-01", "endDate": "2025-03-31"},
    ).json()["data"]
    assert data["total_classes"] == 0
    assert data["student_stats"][0]["attendance_rate"] == 0


def test_stats_dates_and_clear(client, make_course, make_student):
    ana = make_student(last_name="Aquino")
    ben = make_student(last_name="Bautista")
    course = make_course(students=[ana, ben])
    _save(client, course.slug, "2025-03-03", [(ana.id, "PRESENT"), (ben.id, "PRESENT")])
    _save(client, course.slug, "2025-03-05", [(ana.id, "PRESENT"), (ben.id, "NOT_SET")])

    dates = client.get(f"/v1/courses/{course.slug}/attendance/dates").json()["data"]
    assert dates == ["2025-03-03", "2025-03-05"]

    stats = client.get(f"/v1/courses/{course.slug}/attendance/stats").json()["data"]
    assert stats["last_attendance_date"] == "2025-03-05"
    assert stats["total_present"] == 1
    assert stats["total_absents"] == 1
    assert stats["attendance_rate"] == 50

    cleared = client.delete(f"/v1/courses/{course.slug}/attendance/clear", params={"date": "2025-03-05"})
    assert cleared.json()["data"]["deleted"] == 2
    latest = client.get(f"/v1/courses/{course.slug}/attendance").json()["data"]
    assert latest["date"] == "2025-03-03"
    assert len(latest["records"]) == 2
