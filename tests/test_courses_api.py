COURSE = {
    "code": "IT 101",
    "title": "Introduction to Computing",
    "section": "A",
    "room": "R-201",
    "semester": "FIRST_SEMESTER",
    "academic_year": "2024-2025",
    "schedules": [{"day": "Monday", "from_time": "08:00", "to_time": "09:30"}],
}


def test_create_course_builds_slug(client):
    res = client.post("/v1/courses/", json=COURSE)
    assert res.status_code == 201
    course = res.json()["data"]
    assert course["slug"] == "it-101-a"
    assert len(course["schedules"]) == 1

    by_slug = client.get("/v1/courses/it-101-a").json()["data"]
    by_id = client.get(f"/v1/courses/{course['id']}").json()["data"]
    assert by_slug["id"] == by_id["id"]


def test_duplicate_slug_conflict(client):
    client.post("/v1/courses/", json=COURSE)
    assert client.post("/v1/courses/", json=COURSE).status_code == 409


def test_unknown_course_is_404(client):
    res = client.get("/v1/courses/nope-1")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Course not found"


def test_enroll_and_unenroll(client, make_course, make_student):
    course = make_course()
    student = make_student()

    available = client.get(f"/v1/courses/{course.slug}/available-students").json()["data"]
    assert [s["id"] for s in available] == [student.id]

    assert client.post(f"/v1/courses/{course.slug}/students/{student.id}").status_code == 200
    assert client.post(f"/v1/courses/{course.slug}/students/{student.id}").status_code == 409
    enrolled = client.get(f"/v1/courses/{course.slug}/students").json()["data"]
    assert [s["id"] for s in enrolled] == [student.id]

    assert client.delete(f"/v1/courses/{course.slug}/students/{student.id}").status_code == 200
    assert client.get(f"/v1/courses/{course.slug}/students").json()["data"] == []


def test_update_course_regenerates_slug(client, make_course):
    course = make_course()
    data = client.put(f"/v1/courses/{course.slug}", json={"section": "B"}).json()["data"]
    assert data["slug"] == "it-101-b"


def test_students_crud(client):
    res = client.post("/v1/students/", json={"student_id": "2024-0001", "last_name": "Garcia", "first_name": "Luis"})
    assert res.status_code == 201
    student_id = res.json()["data"]["id"]
    assert client.post(
        "/v1/students/", json={"student_id": "2024-0001", "last_name": "X", "first_name": "Y"},
    ).status_code == 409
    assert client.get("/v1/students/", params={"search": "garc"}).json()["meta"]["total"] == 1
    assert client.delete(f"/v1/students/{student_id}").status_code == 200
