def test_notes_crud_ordered_by_date(client, make_user):
    user = make_user()
    other = make_user(email="other@school.edu")

    for title, day in (("Older", "2025-03-01"), ("Newer", "2025-03-15")):
        res = client.post("/v1/notes/", json={
            "user_id": user.id, "title": title, "description": "Bring rubrics", "date": day,
        })
        assert res.status_code == 201
    client.post("/v1/notes/", json={"user_id": other.id, "title": "Not mine", "date": "2025-03-20"})

    notes = client.get("/v1/notes/", params={"user_id": user.id}).json()["data"]
    assert [n["title"] for n in notes] == ["Newer", "Older"]
    assert notes[0]["date"] == "2025-03-15"

    note_id = notes[0]["id"]
    updated = client.put(f"/v1/notes/{note_id}", json={"title": "Moved", "date": "2025-02-01"}).json()["data"]
    assert updated["title"] == "Moved"
    assert updated["description"] == "Bring rubrics"

    assert client.delete(f"/v1/notes/{note_id}").status_code == 200
    assert client.get(f"/v1/notes/{note_id}").status_code == 404


def test_note_for_unknown_user_is_404(client):
    res = client.post("/v1/notes/", json={"user_id": 999, "title": "Lost", "date": "2025-03-01"})
    assert res.status_code == 404
    assert client.get("/v1/notes/", params={"user_id": 999}).status_code == 404


def test_note_requires_valid_date(client, make_user):
    user = make_user()
    res = client.post("/v1/notes/", json={"user_id": user.id, "title": "Bad", "date": "03/01/2025"})
    assert res.status_code == 400
