import pytest

from app.kpidash.models import User
from app.kpidash.security import check_password
from scripts import init_db
from scripts._db_utils import script_session
from scripts.start import gunicorn_argv, resolve_port


def test_seed_is_idempotent(tmp_path, monkeypatch):
    db_url = f"sqlite:///{tmp_path/'seed.db'}"
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("SEED_PASSWORD", "first-pw")

    init_db.create_tables(database_url=db_url)
    assert init_db.seed_only(database_url=db_url) == ["admin", "editor", "viewer"]

    monkeypatch.setenv("SEED_PASSWORD", "second-pw")
    assert init_db.seed_only(database_url=db_url) == []

    with script_session(db_url) as s:
        users = {u.username: u for u in s.query(User).all()}
        assert {u: users[u].role for u in users} == {"admin": "admin", "editor": "editor", "viewer": "viewer"}
        # existing passwords untouched
        assert check_password("first-pw", users["admin"].password_hash)


def test_resolve_port():
    assert resolve_port(None) == 5000
    assert resolve_port(" 8080 ") == 8080
    with pytest.raises(ValueError):
        resolve_port("70000")
    with pytest.raises(ValueError):
        resolve_port("http")


def test_gunicorn_argv_targets_wsgi_app():
    argv = gunicorn_argv(8000)
    assert argv[:2] == ["gunicorn", "app.wsgi:app"]
    assert "0.0.0.0:8000" in argv
