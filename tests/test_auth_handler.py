from conftest import signup_and_login


def test_signup_requires_email_and_password(client):
    resp = client.post("/api/auth/signup", json={"email": "a@example.com"})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Email and password are required"}


def test_signup_rejects_existing_user(client):
    client.post("/api/auth/signup", json={"email": "a@example.com", "password": "pw"})
    resp = client.post("/api/auth/signup", json={"email": "a@example.com", "password": "pw"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "User already exists"


def test_signup_returns_user_id(client):
    resp = client.post("/api/auth/signup", json={"email": "a@example.com", "password": "pw"})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["message"] == "User created successfully"
    assert isinstance(body["userId"], int)


def test_login_with_bad_password(client):
    client.post("/api/auth/signup", json={"email": "a@example.com", "password": "pw"})
    resp = client.post("/api/auth/login", json={"email": "a@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid email or password"}


def test_protected_routes_require_login(client):
    for path in ("/api/budget", "/api/transactions", "/api/profile", "/api/insights/totals"):
        resp = client.get(path)
        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Unauthorized"}


def test_logout_ends_session(auth_client):
    assert auth_client.get("/api/profile").status_code == 200
    assert auth_client.post("/api/auth/logout").status_code == 200
    assert auth_client.get("/api/profile").status_code == 401


def test_profile_roundtrip(auth_client):
    assert auth_client.get("/api/profile").get_json()["email"] == "alice@example.com"

    resp = auth_client.put("/api/profile", json={"name": "Alice B", "email": "ab@example.com"})
    assert resp.status_code == 200
    assert resp.get_json()["name"] == "Alice B"
    assert auth_client.get("/api/profile").get_json()["email"] == "ab@example.com"


def test_profile_requires_name_and_email(auth_client):
    resp = auth_client.put("/api/profile", json={"name": "Only name"})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Name and email are required"}


def test_profile_email_taken(client):
    signup_and_login(client, email="bob@example.com")
    client.post("/api/auth/logout")
    signup_and_login(client)
    resp = client.put("/api/profile", json={"name": "Alice", "email": "bob@example.com"})
    assert resp.status_code == 400


def test_password_change(auth_client):
    resp = auth_client.put("/api/profile/password", json={"currentPassword": "s3cret"})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "All password fields are required"}

    resp = auth_client.put("/api/profile/password",
                           json={"currentPassword": "wrong", "newPassword": "n3w"})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Current password is incorrect"}

    resp = auth_client.put("/api/profile/password",
                           json={"currentPassword": "s3cret", "newPassword": "n3w"})
    assert resp.status_code == 200

    auth_client.post("/api/auth/logout")
    resp = auth_client.post("/api/auth/login", json={"email": "alice@example.com", "password": "n3w"})
    assert resp.status_code == 200


def test_signup_rejects_non_text_fields(client):
    resp = client.post("/api/auth/signup", json={"email": 123, "password": "pw"})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Email and password are required"}

    resp = client.post("/api/auth/signup", json={"email": "a@example.com", "password": ["pw"]})
    assert resp.status_code == 400

    resp = client.post("/api/auth/signup", json={"email": "a@example.com", "password": "pw", "name": 7})
    assert resp.status_code == 400


def test_login_rejects_non_text_fields(client):
    resp = client.post("/api/auth/login", json={"email": {"x": 1}, "password": "pw"})
    assert resp.status_code == 400


def test_profile_rejects_non_text_fields(auth_client):
    resp = auth_client.put("/api/profile", json={"name": 5, "email": "ab@example.com"})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Name and email are required"}

    resp = auth_client.put("/api/profile/password",
                           json={"currentPassword": "s3cret", "newPassword": 1234})
    assert resp.status_code == 400
    assert auth_client.get("/api/profile").get_json()["email"] == "alice@example.com"
