"""Password hashing (bcrypt) and bearer tokens (JWT, HS256)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
import jwt
from flask import Request, current_app

if TYPE_CHECKING:
    from app.kpidash.models import User


JWT_ALGORITHM = "HS256"


def hash_password(password: str, rounds: int | None = None) -> str:
    if rounds is None:
        rounds = int(current_app.config.get("BCRYPT_ROUNDS", 10))
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(password: str, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash (e.g. a row imported from another system)
        return False


def create_access_token(user: "User") -> str:
    """
    Sign a bearer token for the user.

    The token carries identity and role so the frontend can render without an
    extra round trip; the server still reloads the user on every request.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "full_name": user.full_name,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(hours=int(current_app.config.get("JWT_EXPIRES_HOURS", 24))),
    }
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Raises:
        jwt.InvalidTokenError: bad signature, malformed or expired token
    """
    return jwt.decode(
        token,
        current_app.config["JWT_SECRET"],
        algorithms=[JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )


def bearer_token(req: Request) -> str | None:
    header = req.headers.get("Authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None
