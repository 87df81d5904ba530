def test_group_name_and_number_unique_per_course(client, make_course, make_student):
    ana = make_student(last_name="Aquino")
    ben = make_student(last_name="Bautista")
    course = make_course(students=[ana, ben])
    url = f"/v1/courses/{course.slug}/groups"

    res = client.post(url, json={
        "group_number": 1, "group_name": "Alpha", "student_ids": [ana.id, ben.id], "leader_id": ana.id,
    })
    assert res.status_code == 201
    group = res.json()["data"]
    assert group["leader"]["id"] == ana.id
    assert len(group["students"]) == 2

    assert client.get(f"{url}/check-name", params={"name": "Alpha"}).json()["data"] == {"exists": True}
    assert client.get(f"{url}/check-number", params={"number": 2}).json()["data"] == {"exists": False}
    assert client.post(url, json={"group_number": 2, "group_name": "Alpha"}).status_code == 409
    assert client.post(url, json={"group_number": 1, "group_name": "Beta"}).status_code == 409

    assert client.delete(f"{url}/{group['id']}").status_code == 200
    assert client.get(f"{url}/{group['id']}").status_code == 404


def test_group_leader_must_be_member(client, make_course, make_student):
    ana = make_student()
    ben = make_student()
    course = make_course(students=[ana, ben])
    res = client.post(f"/v1/courses/{course.slug}/groups", json={
        "group_number": 1, "student_ids": [ana.id], "leader_id": ben.id,
    })
    assert res.status_code == 400


def test_quiz_scores_upsert_and_feed_grades(client, make_course, make_student):
    student = make_student()
    course = make_course(students=[student])
    client.post(f"/v1/courses/{course.slug}/grade-components", json={
        "reporting_weight": 0, "recitation_weight": 0, "quiz_weight": 100,
        "passing_threshold": 75, "start_date": "2025-01-01", "end_date": "2025-12-31",
    })
    quiz = client.post(
        f"/v1/courses/{course.slug}/quizzes",
        json={"name": "Quiz 1", "quiz_date": "2025-02-01", "max_score": 20},
    ).json()["data"]

    entry = {"student_id": student.id, "score": 15, "attendance": "PRESENT", "total_grade": 75}
    client.post(f"/v1/quizzes/{quiz['id']}/scores", json={"scores": [entry]})
    res = client.post(f"/v1/quizzes/{quiz['id']}/scores", json={"scores": [{**entry, "total_grade": 90}]})
    assert res.status_code == 200
    scores = client.get(f"/v1/quizzes/{quiz['id']}/scores").json()["data"]
    assert len(scores) == 1
    assert scores[0]["total_grade"] == 90

    data = client.get(f"/v1/courses/{course.slug}/students/{student.id}/grades").json()["data"]
    assert data["quiz_score"] == 90
    assert data["remarks"] == "PASSED"

    assert client.delete(f"/v1/quizzes/{quiz['id']}").status_code == 200
    assert client.get(f"/v1/quizzes/{quiz['id']}").status_code == 404


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_group_criteria_forces_group_flag(client, make_course, make_student):
    student = make_student()
    course = make_course(students=[student])
    group = client.post(f"/v1/courses/{course.slug}/groups", json={
        "group_number": 1, "student_ids": [student.id],
    }).json()["data"]
    url = f"/v1/courses/{course.slug}/groups/{group['id']}/criteria"

    client.post(f"/v1/courses/{course.slug}/criteria", json={
        "name": "Individual", "rubrics": [{"name": "Content", "percentage": 100}],
    })
    res = client.post(url, json={"name": "Group Report", "rubrics": [{"name": "Teamwork", "percentage": 100}]})
    assert res.status_code == 201
    created = res.json()["data"]
    assert created["is_group_criteria"] is True
    assert created["kind"] == "GROUP"

    listed = client.get(url).json()["data"]
    assert [c["name"] for c in listed] == ["Group Report"]


def test_group_criteria_unknown_group_is_404(client, make_course):
    course = make_course()
    url = f"/v1/courses/{course.slug}/groups/999/criteria"
    assert client.get(url).status_code == 404
    res = client.post(url, json={"name": "Group Report", "rubrics": [{"name": "Teamwork", "percentage": 100}]})
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Group not found"
