import pytest

from app.kpidash import create_app
from app.kpidash.db import session_scope
from app.kpidash.models import Base, User
from app.kpidash.security import hash_password

PASSWORD = "pw-123456"


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("JWT_SECRET", "test-jwt-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.delenv("NEON_DATABASE_URL", raising=False)

    app = create_app()

    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    with session_scope(app) as s:
        for username, role in (("admin", "admin"), ("editor", "editor"), ("viewer", "viewer")):
            s.add(
                User(
                    full_name=f"{username.title()} Person",
                    username=username,
                    email=f"{username}@example.com",
                    password_hash=hash_password(PASSWORD, rounds=4),
                    role=role,
                    is_active=True,
                )
            )
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


def login(client, username: str, password: str = PASSWORD) -> dict:
    r = client.post("/api/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.json
    return {"Authorization": f"Bearer {r.json['token']}"}


@pytest.fixture()
def login_as(client):
    def _login(username: str, password: str = PASSWORD) -> dict:
        return login(client, username, password)

    return _login


@pytest.fixture()
def admin_headers(client):
    return login(client, "admin")


@pytest.fixture()
def editor_headers(client):
    return login(client, "editor")


@pytest.fixture()
def viewer_headers(client):
    return login(client, "viewer")


@pytest.fixture()
def seed_client(client, admin_headers):
    r = client.post("/api/clients", json={"name": "Acme Roofing"}, headers=admin_headers)
    assert r.status_code == 201
    return r.json


@pytest.fixture()
def seed_member(client, admin_headers):
    r = client.post("/api/team", json={"name": "Dana Lee", "email": "dana@example.com"}, headers=admin_headers)
    assert r.status_code == 201
    return r.json
