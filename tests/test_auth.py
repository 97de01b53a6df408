from datetime import datetime, timedelta

from app.kpidash.auth import _check_rate_limit


def test_login_with_username_or_email(client):
    r = client.post("/api/auth/login", json={"username": "admin", "password": "pw-123456"})
    assert r.status_code == 200
    assert r.json["message"] == "Login successful"
    assert r.json["user"]["role"] == "admin"
    assert "password_hash" not in r.json["user"]
    assert r.json["token"]

    r = client.post("/api/auth/login", json={"username": "editor@example.com", "password": "pw-123456"})
    assert r.status_code == 200
    assert r.json["user"]["username"] == "editor"


def test_login_errors(client):
    r = client.post("/api/auth/login", json={"username": "admin"})
    assert r.status_code == 400

    r = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    assert r.status_code == 401
    assert r.json["error"] == "Invalid credentials"

    r = client.post("/api/auth/login", json={"username": "ghost", "password": "pw-123456"})
    assert r.status_code == 401


def test_login_rate_limited_after_repeated_failures(client):
    for _ in range(5):
        r = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
        assert r.status_code == 401
    r = client.post("/api/auth/login", json={"username": "admin", "password": "pw-123456"})
    assert r.status_code == 429


def test_inactive_user_cannot_login(client, admin_headers):
    users = client.get("/api/auth/users", headers=admin_headers).json
    viewer = next(u for u in users if u["username"] == "viewer")
    r = client.put(f"/api/auth/users/{viewer['id']}", json={"is_active": False}, headers=admin_headers)
    assert r.status_code == 200

    r = client.post("/api/auth/login", json={"username": "viewer", "password": "pw-123456"})
    assert r.status_code == 401


def test_register_defaults_to_viewer(client):
    r = client.post(
        "/api/auth/register",
        json={"full_name": "New Person", "username": "newbie", "email": "new@example.com", "password": "pw", "role": "admin"},
    )
    assert r.status_code == 201
    assert r.json["message"] == "User created successfully"
    assert r.json["user"]["role"] == "viewer"
    assert r.json["token"]


def test_admin_can_register_editor(client, admin_headers):
    r = client.post(
        "/api/auth/register",
        json={"full_name": "Ed", "username": "ed2", "email": "ed2@example.com", "password": "pw", "role": "editor"},
        headers=admin_headers,
    )
    assert r.status_code == 201
    assert r.json["user"]["role"] == "editor"


def test_register_validation(client):
    r = client.post("/api/auth/register", json={"username": "x", "email": "x@example.com", "password": "pw"})
    assert r.status_code == 400

    r = client.post(
        "/api/auth/register",
        json={"full_name": "Dup", "username": "admin", "email": "other@example.com", "password": "pw"},
    )
    assert r.status_code == 400
    assert r.json["error"] == "Username or email already exists"


def test_profile_and_change_password(client, login_as):
    headers = login_as("editor")
    r = client.get("/api/auth/profile", headers=headers)
    assert r.status_code == 200
    assert r.json["username"] == "editor"
    assert "password_hash" not in r.json

    r = client.post("/api/auth/change-password", json={"currentPassword": "bad", "newPassword": "x"}, headers=headers)
    assert r.status_code == 401

    r = client.post("/api/auth/change-password", json={"currentPassword": "pw-123456"}, headers=headers)
    assert r.status_code == 400

    r = client.post(
        "/api/auth/change-password", json={"currentPassword": "pw-123456", "newPassword": "fresh-pw"}, headers=headers
    )
    assert r.status_code == 200
    login_as("editor", "fresh-pw")


def test_profile_requires_token(client):
    r = client.get("/api/auth/profile")
    assert r.status_code == 401


def test_user_admin_is_admin_only(client, editor_headers):
    r = client.get("/api/auth/users", headers=editor_headers)
    assert r.status_code == 403
    assert r.json["error"] == "Insufficient permissions"


def test_admin_updates_and_deletes_users(client, admin_headers):
    users = {u["username"]: u for u in client.get("/api/auth/users", headers=admin_headers).json}
    assert set(users) == {"admin", "editor", "viewer"}

    r = client.put(f"/api/auth/users/{users['viewer']['id']}", json={"role": "editor"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json["user"]["role"] == "editor"

    r = client.put(f"/api/auth/users/{users['viewer']['id']}", json={"role": "owner"}, headers=admin_headers)
    assert r.status_code == 400

    r = client.put(
        f"/api/auth/users/{users['viewer']['id']}", json={"email": "editor@example.com"}, headers=admin_headers
    )
    assert r.status_code == 400
    assert r.json["error"] == "Email already exists"

    r = client.put(f"/api/auth/users/{users['admin']['id']}", json={"role": "viewer"}, headers=admin_headers)
    assert r.status_code == 400

    r = client.delete(f"/api/auth/users/{users['admin']['id']}", headers=admin_headers)
    assert r.status_code == 400

    r = client.delete(f"/api/auth/users/{users['viewer']['id']}", headers=admin_headers)
    assert r.status_code == 200
    r = client.delete(f"/api/auth/users/{users['viewer']['id']}", headers=admin_headers)
    assert r.status_code == 404


def test_deleted_users_token_stops_working(client, admin_headers, login_as):
    viewer_headers = login_as("viewer")
    users = {u["username"]: u for u in client.get("/api/auth/users", headers=admin_headers).json}
    client.delete(f"/api/auth/users/{users['viewer']['id']}", headers=admin_headers)

    r = client.get("/api/clients", headers=viewer_headers)
    assert r.status_code == 403


def test_non_string_fields_are_400(client, admin_headers):
    r = client.post(
        "/api/auth/register",
        json={"full_name": 1, "username": "numbers", "email": "n@example.com", "password": "pw-123456"},
    )
    assert r.status_code == 400
    assert r.json["error"] == "full_name must be a string"

    r = client.post("/api/auth/register", json=["not", "an", "object"])
    assert r.status_code == 400
    assert r.json["error"] == "All fields are required"

    r = client.post("/api/auth/login", json={"username": "admin", "password": 123456})
    assert r.status_code == 400

    users = client.get("/api/auth/users", headers=admin_headers).json
    viewer = next(u for u in users if u["username"] == "viewer")
    r = client.put(f"/api/auth/users/{viewer['id']}", json={"role": ["admin"]}, headers=admin_headers)
    assert r.status_code == 400


def test_rate_limit_forgets_idle_addresses(app, client):
    r = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    assert r.status_code == 401
    attempts = app.extensions["login_attempts"]
    assert len(attempts["127.0.0.1"]) == 1

    client.post("/api/auth/login", json={"username": "admin", "password": "pw-123456"})
    assert "127.0.0.1" not in attempts

    attempts["10.0.0.9"] = [datetime.utcnow() - timedelta(hours=1)]
    with app.test_request_context():
        assert _check_rate_limit("10.0.0.9") is False
    assert "10.0.0.9" not in attempts
