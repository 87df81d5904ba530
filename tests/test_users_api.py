from models.users import Role, WorkType

NEW_USER = {
    "name": "Santos Juan",
    "email": "Juan.Santos@School.edu",
    "department": "Information Technology",
    "work_type": "FULL_TIME",
    "role": "FACULTY",
}


def test_create_and_read_user(client):
    res = client.post("/v1/users/", json=NEW_USER)
    assert res.status_code == 201
    user = res.json()["data"]
    assert user["email"] == "juan.santos@school.edu"
    assert user["permission"] == "GRANTED"

    found = client.get("/v1/users/by-email", params={"email": "JUAN.SANTOS@school.edu"}).json()["data"]
    assert found["id"] == user["id"]


def test_duplicate_email_conflict(client):
    client.post("/v1/users/", json=NEW_USER)
    res = client.post("/v1/users/", json=NEW_USER)
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"


def test_list_filters_and_paginates(client, make_user):
    make_user(email="a@school.edu", name="Abad Carlo")
    make_user(email="b@school.edu", name="Bernal Dina", role=Role.ADMIN)
    make_user(email="c@school.edu", name="Cruz Elena")

    body = client.get("/v1/users/", params={"role": "FACULTY", "size": 1}).json()
    assert body["meta"]["total"] == 2
    assert body["meta"]["pages"] == 2
    assert body["data"][0]["name"] == "Abad Carlo"

    desc = client.get("/v1/users/", params={"sort": "name,desc"}).json()["data"]
    assert desc[0]["name"] == "Cruz Elena"

    assert client.get("/v1/users/", params={"sort": "password,asc"}).status_code == 400


def test_faculty_count(client, make_user):
    make_user(email="a@school.edu")
    make_user(email="b@school.edu", work_type=WorkType.PART_TIME)
    make_user(email="c@school.edu", work_type=WorkType.PART_TIME)
    make_user(email="d@school.edu", role=Role.ADMIN)
    data = client.get("/v1/users/faculty-count").json()["data"]
    assert data == {"full_time": 1, "part_time": 2, "contract": 0}


def test_faculty_stats(client, make_user, make_course, make_student):
    faculty = make_user()
    make_course(code="IT 101", students=[make_student(), make_student()], faculty=faculty)
    make_course(code="IT 102", faculty=faculty)
    data = client.get(f"/v1/users/{faculty.id}/faculty-stats").json()["data"]
    assert data["total_courses"] == 2
    assert data["total_students"] == 2


def test_update_and_delete_user(client, make_user):
    user = make_user()
    res = client.put(f"/v1/users/{user.id}", json={"department": "Mathematics"})
    assert res.json()["data"]["department"] == "Mathematics"
    assert client.delete(f"/v1/users/{user.id}").status_code == 200
    assert client.get(f"/v1/users/{user.id}").status_code == 404
