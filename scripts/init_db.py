"""
Seed the demo accounts (admin / editor / viewer).

Idempotent: existing users are left alone, passwords are never overwritten.

Usage:
  python scripts/init_db.py                 # seed only (tables must exist, run alembic first)
  python scripts/init_db.py --create-tables # local SQLite: create tables from the models, then seed
"""

from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime
from pathlib import Path

import bcrypt

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.kpidash.models import Base, User
from scripts._db_utils import create_script_engine, resolve_database_url, script_session

SEED_USERS = (
    # (username, full_name, email, role)
    ("admin", "Admin User", "admin@kpidash.local", "admin"),
    ("editor", "Editor User", "editor@kpidash.local", "editor"),
    ("viewer", "Viewer User", "viewer@kpidash.local", "viewer"),
)


def _hash(password: str) -> str:
    rounds = int(os.environ.get("BCRYPT_ROUNDS") or 10)
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def create_tables(*, database_url: str | None = None) -> None:
    db_url = resolve_database_url(database_url)
    engine = create_script_engine(db_url)
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()
    print("Created tables from models.")


def seed_only(*, database_url: str | None = None) -> list[str]:
    """Returns the usernames that were created on this run."""
    password = os.environ.get("SEED_PASSWORD") or "password123"
    db_url = resolve_database_url(database_url)

    created: list[str] = []
    with script_session(db_url) as s:
        for username, full_name, email, role in SEED_USERS:
            exists = s.query(User.id).filter((User.username == username) | (User.email == email)).first()
            if exists:
                continue
            now = datetime.utcnow()
            s.add(
                User(
                    full_name=full_name,
                    username=username,
                    email=email,
                    password_hash=_hash(password),
                    role=role,
                    is_active=True,
                    created_at=now,
                    updated_at=now,
                )
            )
            created.append(username)

    print("Initialized database (seed_only).")
    print(f"Created users: {', '.join(created) if created else '(none, all present)'}")
    print("Seed password: (from SEED_PASSWORD)")
    return created


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed KPI dashboard users.")
    parser.add_argument("--create-tables", action="store_true", help="create tables from models before seeding")
    args = parser.parse_args(argv)

    if args.create_tables:
        create_tables()
    seed_only()


if __name__ == "__main__":
    main()
