import auth


def test_password_hash_roundtrip():
    hashed = auth.get_password_hash("supersecret")
    assert hashed != "supersecret"
    assert auth.verify_password("supersecret", hashed)
    assert not auth.verify_password("wrong-password", hashed)


def test_login(client, test_user):
    response = client.post("/login", json=test_user)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["user"]["email"] == test_user["email"]
    assert set(body["user"]) == {"id", "name", "email"}


def test_login_sets_session(client, test_user):
    client.post("/login", json=test_user)
    session = client.get("/session").json()["data"]
    assert session["logged_in"] is True
    assert session["user_email"] == test_user["email"]
    assert session["user_name"] == "Admin User"


def test_logout_clears_session(client, test_user):
    client.post("/login", json=test_user)
    client.post("/logout")
    assert client.get("/session").status_code == 401


def test_login_wrong_password(client, test_user):
    response = client.post("/login", json={"email": test_user["email"], "password": "not-the-password"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid email or password"}


def test_login_unknown_email(client):
    response = client.post("/login", json={"email": "ghost@university.edu", "password": "whatever123"})
    assert response.status_code == 401


def test_login_validation(client):
    assert client.post("/login", json={"email": "admin@university.edu"}).status_code == 400
    assert client.post("/login", json={"email": "nope", "password": "longenough"}).status_code == 400
    short = client.post("/login", json={"email": "admin@university.edu", "password": "short"})
    assert short.status_code == 400
    assert "at least 8" in short.json()["message"]
