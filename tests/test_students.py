import database


def _count(db):
    return db.query(database.Student).count()


def test_create_student(client, test_student):
    response = client.post("/students", json=test_student)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["student_id"] == test_student["student_id"]
    assert "password" not in body["data"]


def test_create_student_stores_hash(client, db, test_student):
    client.post("/students", json=test_student)
    stored = db.query(database.Student).filter_by(student_id=test_student["student_id"]).one()
    assert stored.password != test_student["password"]


def test_create_student_trims_fields(client, test_student):
    test_student.update(name="  Alice Smith  ", student_id=" 202301 ")
    client.post("/students", json=test_student)
    data = client.get("/students", params={"student_id": "202301"}).json()["data"]
    assert data["name"] == "Alice Smith"


def test_create_student_missing_fields(client, test_student):
    del test_student["password"]
    response = client.post("/students", json=test_student)
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Missing required fields"}


def test_create_student_blank_field(client, test_student):
    test_student["name"] = "   "
    assert client.post("/students", json=test_student).status_code == 400


def test_create_student_invalid_email(client, test_student):
    test_student["email"] = "not-an-email"
    response = client.post("/students", json=test_student)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid email format"


def test_duplicate_student_id_conflicts(client, db, test_student):
    client.post("/students", json=test_student)
    duplicate = dict(test_student, email="other@university.edu")
    response = client.post("/students", json=duplicate)
    assert response.status_code == 409
    assert response.json()["success"] is False
    assert _count(db) == 1


def test_duplicate_email_conflicts(client, db, test_student):
    client.post("/students", json=test_student)
    duplicate = dict(test_student, student_id="999999")
    response = client.post("/students", json=duplicate)
    assert response.status_code == 409
    assert _count(db) == 1


def test_numeric_student_id_accepted(client, test_student):
    test_student["student_id"] = 202399
    response = client.post("/students", json=test_student)
    assert response.status_code == 201
    assert response.json()["data"]["student_id"] == "202399"


def test_get_student(client, test_student):
    client.post("/students", json=test_student)
    response = client.get("/students", params={"student_id": test_student["student_id"]})
    assert response.status_code == 200
    assert response.json()["data"]["email"] == test_student["email"]


def test_get_missing_student(client):
    response = client.get("/students", params={"student_id": "nope"})
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Student not found"}


def _seed(client):
    for sid, name, email in [
        ("300", "Charlie Brown", "charlie@university.edu"),
        ("100", "alice Cooper", "alice@university.edu"),
        ("200", "Bob Marley", "bob@music.org"),
    ]:
        client.post("/students", json={"student_id": sid, "name": name, "email": email, "password": "password1"})


def test_list_students_excludes_password(client):
    _seed(client)
    data = client.get("/students").json()["data"]
    assert len(data) == 3
    assert all("password" not in row for row in data)


def test_search_is_case_insensitive_across_fields(client):
    _seed(client)
    by_name = client.get("/students", params={"search": "ALICE"}).json()["data"]
    assert [s["student_id"] for s in by_name] == ["100"]
    by_email = client.get("/students", params={"search": "music"}).json()["data"]
    assert [s["name"] for s in by_email] == ["Bob Marley"]
    by_id = client.get("/students", params={"search": "30"}).json()["data"]
    assert [s["student_id"] for s in by_id] == ["300"]


def test_search_wildcards_match_literally(client):
    _seed(client)
    assert client.get("/students", params={"search": "%"}).json()["data"] == []
    assert client.get("/students", params={"search": "_"}).json()["data"] == []

    client.post("/students", json={"student_id": "400", "name": "Dana 100%_sure", "email": "dana@university.edu",
                                   "password": "password1"})
    found = client.get("/students", params={"search": "0%_S"}).json()["data"]
    assert [s["student_id"] for s in found] == ["400"]


def test_sort_students(client):
    _seed(client)
    asc = client.get("/students", params={"sort": "student_id", "order": "asc"}).json()["data"]
    assert [s["student_id"] for s in asc] == ["100", "200", "300"]
    desc = client.get("/students", params={"sort": "email", "order": "DESC"}).json()["data"]
    assert [s["email"] for s in desc] == sorted([s["email"] for s in desc], reverse=True)


def test_invalid_order_defaults_to_ascending(client):
    _seed(client)
    data = client.get("/students", params={"sort": "student_id", "order": "sideways"}).json()["data"]
    assert [s["student_id"] for s in data] == ["100", "200", "300"]


def test_invalid_sort_field_is_ignored(client):
    _seed(client)
    data = client.get("/students", params={"sort": "password; DROP TABLE students"}).json()["data"]
    assert [s["student_id"] for s in data] == ["300", "100", "200"]


def test_repeated_list_is_identical(client):
    _seed(client)
    params = {"search": "o", "sort": "name", "order": "desc"}
    first = client.get("/students", params=params).json()
    second = client.get("/students", params=params).json()
    assert first == second


def test_update_student(client, test_student):
    client.post("/students", json=test_student)
    response = client.put("/students", json={"student_id": "202301", "name": "Alice Jones"})
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Alice Jones"
    assert response.json()["data"]["email"] == test_student["email"]


def test_update_student_requires_a_field(client, test_student):
    client.post("/students", json=test_student)
    response = client.put("/students", json={"student_id": "202301"})
    assert response.status_code == 400
    assert response.json()["message"] == "No fields to update"


def test_update_missing_student(client):
    response = client.put("/students", json={"student_id": "404404", "name": "Ghost"})
    assert response.status_code == 404


def test_update_email_validation_and_conflict(client, test_student):
    client.post("/students", json=test_student)
    client.post("/students", json=dict(test_student, student_id="2", email="taken@university.edu"))

    bad = client.put("/students", json={"student_id": "202301", "email": "broken"})
    assert bad.status_code == 400

    clash = client.put("/students", json={"student_id": "202301", "email": "taken@university.edu"})
    assert clash.status_code == 409

    same = client.put("/students", json={"student_id": "202301", "email": test_student["email"]})
    assert same.status_code == 200


def test_delete_student(client, db, test_student):
    client.post("/students", json=test_student)
    response = client.delete("/students", params={"student_id": "202301"})
    assert response.status_code == 200
    assert _count(db) == 0


def test_delete_student_id_in_body(client, db, test_student):
    client.post("/students", json=test_student)
    response = client.request("DELETE", "/students", json={"student_id": "202301"})
    assert response.status_code == 200
    assert _count(db) == 0


def test_delete_missing_student(client):
    assert client.delete("/students", params={"student_id": "nope"}).status_code == 404
    assert client.delete("/students").status_code == 400


def _change(client, **overrides):
    payload = {"student_id": "202301", "current_password": "initialpass", "new_password": "brandnewpass"}
    payload.update(overrides)
    return client.post("/students", params={"action": "change_password"}, json=payload)


def test_change_password(client, db, test_student):
    client.post("/students", json=test_student)
    response = _change(client)
    assert response.status_code == 200
    assert response.json()["message"] == "Password updated successfully"

    # the old password no longer verifies
    assert _change(client, current_password="initialpass", new_password="anotherpass").status_code == 401
    assert _change(client, current_password="brandnewpass", new_password="anotherpass").status_code == 200


def test_change_password_wrong_current(client, db, test_student):
    client.post("/students", json=test_student)
    before = db.query(database.Student).filter_by(student_id="202301").one().password

    response = _change(client, current_password="wrongpass")
    assert response.status_code == 401

    db.expire_all()
    after = db.query(database.Student).filter_by(student_id="202301").one().password
    assert before == after


def test_change_password_too_short(client, test_student):
    client.post("/students", json=test_student)
    response = _change(client, new_password="short")
    assert response.status_code == 400
    assert "at least 8 characters" in response.json()["message"]


def test_change_password_missing_fields(client):
    response = client.post("/students", params={"action": "change_password"}, json={"student_id": "1"})
    assert response.status_code == 400


def test_change_password_unknown_student(client):
    assert _change(client, student_id="000").status_code == 401
