CONFIG = {
    "name": "Midterm",
    "reporting_weight": 40,
    "recitation_weight": 30,
    "quiz_weight": 30,
    "passing_threshold": 75,
    "start_date": "2025-01-01",
    "end_date": "2025-05-31",
}


def _criteria(client, slug, recitation=False):
    res = client.post(f"/v1/courses/{slug}/criteria", json={
        "name": "Recitation" if recitation else "Reporting",
        "rubrics": [{"name": "Content", "percentage": 60}, {"name": "Delivery", "percentage": 40}],
        "is_recitation_criteria": recitation,
    })
    assert res.status_code == 201
    return res.json()["data"]["id"]


def test_student_grade_without_configuration_is_404(client, make_course, make_student):
    student = make_student()
    course = make_course(students=[student])
    res = client.get(f"/v1/courses/{course.slug}/students/{student.id}/grades")
    assert res.status_code == 404
    body = res.json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND"


def test_invalid_date_is_400(client, make_course, make_student):
    student = make_student()
    course = make_course(students=[student])
    client.post(f"/v1/courses/{course.slug}/grade-components", json=CONFIG)
    res = client.get(
        f"/v1/courses/{course.slug}/students/{student.id}/grades",
        params={"from": "03/01/2025"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_ARGUMENT"


def test_weights_must_sum_to_100(client, make_course):
    course = make_course()
    res = client.post(f"/v1/courses/{course.slug}/grade-components", json={**CONFIG, "quiz_weight": 40})
    assert res.status_code == 400


def test_no_records_gives_no_grade(client, make_course, make_student):
    student = make_student()
    course = make_course(students=[student])
    client.post(f"/v1/courses/{course.slug}/grade-components", json=CONFIG)
    data = client.get(f"/v1/courses/{course.slug}/students/{student.id}/grades").json()["data"]
    assert data["remarks"] == "NO GRADE"
    assert data["grade_details"] == {"reporting_grades": 0, "recitation_grades": 0, "quiz_grades": 0}


def test_aggregates_reporting_and_recitation(client, make_course, make_student):
    student = make_student()
    course = make_course(students=[student])
    client.post(f"/v1/courses/{course.slug}/grade-components", json=CONFIG)
    reporting_id = _criteria(client, course.slug)
    recitation_id = _criteria(client, course.slug, recitation=True)

    for day, total in (("2025-02-01", 90), ("2025-02-08", 70)):
        res = client.post(f"/v1/courses/{course.slug}/grades", json={
            "date": day, "criteria_id": reporting_id,
            "grades": [{"student_id": student.id, "scores": [5, 4], "total": total}],
        })
        assert res.status_code == 200
    client.post(f"/v1/courses/{course.slug}/grades", json={
        "date": "2025-02-01", "criteria_id": recitation_id,
        "grades": [{"student_id": student.id, "scores": [5], "total": 100}],
    })

    data = client.get(f"/v1/courses/{course.slug}/students/{student.id}/grades").json()["data"]
    # 보고 평균 80, 암송 100, 퀴즈 없음 → 32 + 30 + 0
    assert data["reporting_score"] == 80
    assert data["recitation_score"] == 100
    assert data["total_score"] == 62
    assert data["remarks"] == "FAILED"

    ranged = client.get(
        f"/v1/courses/{course.slug}/students/{student.id}/grades",
        params={"from": "2025-02-05", "to": "2025-02-10"},
    ).json()["data"]
    assert ranged["grade_details"]["reporting_grades"] == 1
    assert ranged["reporting_score"] == 70


def test_saving_same_date_and_criteria_replaces_records(client, make_course, make_student):
    student = make_student()
    course = make_course(students=[student])
    criteria_id = _criteria(client, course.slug)
    payload = {
        "date": "2025-02-01", "criteria_id": criteria_id,
        "grades": [{"student_id": student.id, "scores": [3], "total": 60}],
    }
    client.post(f"/v1/courses/{course.slug}/grades", json=payload)
    payload["grades"][0]["total"] = 95
    client.post(f"/v1/courses/{course.slug}/grades", json=payload)

    rows = client.get(
        f"/v1/courses/{course.slug}/grades",
        params={"date": "2025-02-01", "criteria_id": criteria_id},
    ).json()["data"]
    assert len(rows) == 1
    assert rows[0]["total"] == 95
    assert rows[0]["reporting_score"] == 95
    assert rows[0]["recitation_score"] is None


def test_grades_for_unenrolled_student_rejected(client, make_course, make_student):
    outsider = make_student(last_name="Lopez")
    course = make_course()
    criteria_id = _criteria(client, course.slug)
    res = client.post(f"/v1/courses/{course.slug}/grades", json={
        "date": "2025-02-01", "criteria_id": criteria_id,
        "grades": [{"student_id": outsider.id, "scores": [], "total": 50}],
    })
    assert res.status_code == 400


def test_latest_configuration_wins_and_snapshots_go_stale(client, make_course, make_student):
    student = make_student()
    course = make_course(students=[student])
    first = client.post(f"/v1/courses/{course.slug}/grade-components", json=CONFIG).json()["data"]
    assert first["version"] == 1

    saved = client.post(
        f"/v1/courses/{course.slug}/students/{student.id}/grades",
        json={"reporting_score": 80, "recitation_score": 90, "quiz_score": 70},
    )
    assert saved.status_code == 201
    snapshot = saved.json()["data"]
    assert snapshot["total_score"] == 80
    assert snapshot["remarks"] == "PASSED"
    assert snapshot["config_version"] == 1
    assert snapshot["is_stale"] is False

    second = client.post(
        f"/v1/courses/{course.slug}/grade-components",
        json={**CONFIG, "name": "Finals", "passing_threshold": 85},
    ).json()["data"]
    assert second["version"] == 2

    current = client.get(f"/v1/courses/{course.slug}/grade-components/current").json()["data"]
    assert current["id"] == second["id"]

    scores = client.get(f"/v1/courses/{course.slug}/grade-scores").json()["data"]
    assert len(scores) == 1
    assert scores[0]["config_version"] == 1
    assert scores[0]["is_stale"] is True

    latest = client.get(f"/v1/courses/{course.slug}/students/{student.id}/reporting-scores").json()["data"]
    assert latest["id"] == snapshot["id"]


def test_snapshot_without_scores_is_no_grade(client, make_course, make_student):
    student = make_student()
    course = make_course(students=[student])
    client.post(f"/v1/courses/{course.slug}/grade-components", json=CONFIG)
    data = client.post(f"/v1/courses/{course.slug}/students/{student.id}/grades", json={}).json()["data"]
    assert data["remarks"] == "NO GRADE"


def test_criteria_cannot_be_group_and_recitation(client, make_course):
    course = make_course()
    res = client.post(f"/v1/courses/{course.slug}/criteria", json={
        "name": "Both",
        "rubrics": [{"name": "Content", "percentage": 100}],
        "is_group_criteria": True,
        "is_recitation_criteria": True,
    })
    assert res.status_code == 400
