from __future__ import annotations

import re
import uuid
from collections import defaultdict
from datetime import datetime, timedelta

import jwt
from flask import Blueprint, abort, current_app, g, jsonify, request
from sqlalchemy import or_

from app.kpidash.activity import actor_name, record_activity
from app.kpidash.constants import ROLES
from app.kpidash.db import db_session
from app.kpidash.models import User
from app.kpidash.rbac import current_user, require_auth, require_role, user_has_role
from app.kpidash.security import bearer_token, check_password, create_access_token, decode_access_token, hash_password
from app.kpidash.utils import json_object

bp = Blueprint("auth", __name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _login_attempts() -> dict[str, list[datetime]]:
    return current_app.extensions.setdefault("login_attempts", defaultdict(list))


def _check_rate_limit(ip: str) -> bool:
    attempts = _login_attempts()
    now = datetime.utcnow()
    cutoff = now - timedelta(seconds=int(current_app.config.get("LOGIN_RATE_WINDOW", 300)))
    recent = [t for t in attempts.get(ip, ()) if t > cutoff]
    if not recent:
        attempts.pop(ip, None)
        return False
    attempts[ip] = recent
    return len(recent) >= int(current_app.config.get("LOGIN_RATE_LIMIT", 5))


def _record_attempt(ip: str) -> None:
    _login_attempts()[ip].append(datetime.utcnow())


def load_current_user() -> None:
    """
    Loads g.current_user from the Authorization bearer token.
    Also assigns a simple per-request request_id (for log correlation).
    g.auth_error is "missing" or "invalid" when no user could be loaded.
    """
    if not getattr(g, "request_id", None):
        g.request_id = uuid.uuid4().hex
    g.current_user = None
    g.auth_error = None

    token = bearer_token(request)
    if not token:
        g.auth_error = "missing"
        return

    try:
        claims = decode_access_token(token)
        user_id = uuid.UUID(str(claims["sub"]))
    except (jwt.InvalidTokenError, ValueError) as e:
        current_app.logger.info("Rejected bearer token (request_id=%s): %s", g.request_id, e)
        g.auth_error = "invalid"
        return

    user = db_session().get(User, user_id)
    if not user or not user.is_active:
        g.auth_error = "invalid"
        return
    g.current_user = user


def _text(payload: dict, name: str, *, strip: bool = True) -> str:
    value = payload.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        abort(400, description=f"{name} must be a string")
    return value.strip() if strip else value


def _auth_response(user: User, message: str, status: int = 200):
    return jsonify({"message": message, "user": _user_summary(user), "token": create_access_token(user)}), status


def _user_summary(user: User) -> dict:
    return {
        "id": str(user.id),
        "full_name": user.full_name,
        "username": user.username,
        "email": user.email,
        "role": user.role,
    }


@bp.post("/register")
def register():
    payload = json_object()
    full_name = _text(payload, "full_name")
    username = _text(payload, "username")
    email = _text(payload, "email")
    password = _text(payload, "password", strip=False)
    requested_role = _text(payload, "role")

    if not full_name or not username or not email or not password:
        abort(400, description="All fields are required")
    if not _EMAIL_RE.match(email):
        abort(400, description="Invalid email address")

    # Only an authenticated admin may hand out roles above viewer.
    actor: User | None = getattr(g, "current_user", None)
    role = "viewer"
    if requested_role in ROLES and (requested_role == "viewer" or user_has_role(actor, "admin")):
        role = requested_role

    s = db_session()
    existing = s.query(User.id).filter(or_(User.username == username, User.email == email)).first()
    if existing:
        abort(400, description="Username or email already exists")

    now = datetime.utcnow()
    user = User(
        full_name=full_name,
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=role,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    s.add(user)
    s.flush()

    record_activity(
        s,
        actor=actor or user,
        action_type="user_added",
        entity_type="user",
        entity_id=user.id,
        entity_name=user.full_name,
        description=f"{actor_name(actor or user)} added new user: {user.full_name}",
    )
    s.commit()
    current_app.logger.info("User registered: %s (role=%s)", user.username, user.role)
    return _auth_response(user, "User created successfully", 201)


@bp.post("/login")
def login():
    payload = json_object()
    username = _text(payload, "username")
    password = _text(payload, "password", strip=False)
    ip = request.remote_addr or "unknown"

    if not username or not password:
        abort(400, description="Username and password are required")

    if _check_rate_limit(ip):
        abort(429, description="Too many login attempts. Please wait a few minutes.")
    _record_attempt(ip)

    s = db_session()
    user = (
        s.query(User)
        .filter(or_(User.username == username, User.email == username))
        .filter(User.is_active.is_(True))
        .first()
    )
    if not user or not check_password(password, user.password_hash):
        current_app.logger.warning("Login failed (username=%s ip=%s request_id=%s)", username, ip, g.request_id)
        abort(401, description="Invalid credentials")

    _login_attempts().pop(ip, None)
    current_app.logger.info("Login ok: %s", user.username)
    return _auth_response(user, "Login successful")


@bp.get("/profile")
def profile():
    require_auth()
    return jsonify(current_user().to_public_dict())


@bp.post("/change-password")
def change_password():
    require_auth()
    payload = json_object()
    current_password = _text(payload, "currentPassword", strip=False)
    new_password = _text(payload, "newPassword", strip=False)
    if not current_password or not new_password:
        abort(400, description="Current and new password are required")

    s = db_session()
    user = current_user()
    if not check_password(current_password, user.password_hash):
        abort(401, description="Current password is incorrect")

    user.password_hash = hash_password(new_password)
    user.updated_at = datetime.utcnow()
    s.commit()
    return jsonify({"message": "Password changed successfully"})


@bp.get("/users")
@require_role("admin")
def users_list():
    s = db_session()
    users = s.query(User).order_by(User.created_at.desc()).all()
    return jsonify([u.to_public_dict() for u in users])


@bp.put("/users/<uuid:user_id>")
@require_role("admin")
def users_update(user_id: uuid.UUID):
    s = db_session()
    actor = current_user()
    payload = json_object()

    full_name = _text(payload, "full_name")
    email = _text(payload, "email")
    role = _text(payload, "role")
    password = _text(payload, "password", strip=False)
    is_active = payload.get("is_active")

    if role and role not in ROLES:
        abort(400, description="Invalid role")
    if user_id == actor.id and role and role != "admin":
        abort(400, description="Cannot change your own role")
    if user_id == actor.id and is_active is False:
        abort(400, description="Cannot deactivate your own account")
    if email and not _EMAIL_RE.match(email):
        abort(400, description="Invalid email address")

    user = s.get(User, user_id)
    if not user:
        abort(404, description="User not found")

    if email:
        taken = s.query(User.id).filter(User.email == email, User.id != user_id).first()
        if taken:
            abort(400, description="Email already exists")

    if full_name:
        user.full_name = full_name
    if email:
        user.email = email
    if role:
        user.role = role
    if password:
        user.password_hash = hash_password(password)
    if isinstance(is_active, bool):
        user.is_active = is_active
    user.updated_at = datetime.utcnow()

    record_activity(
        s,
        actor=actor,
        action_type="user_edited",
        entity_type="user",
        entity_id=user.id,
        entity_name=user.full_name,
        description=f"{actor_name(actor)} edited user: {user.full_name}",
    )
    s.commit()
    return jsonify({"message": "User updated successfully", "user": _user_summary(user)})


@bp.delete("/users/<uuid:user_id>")
@require_role("admin")
def users_delete(user_id: uuid.UUID):
    s = db_session()
    actor = current_user()
    if user_id == actor.id:
        abort(400, description="Cannot delete your own account")

    user = s.get(User, user_id)
    if not user:
        abort(404, description="User not found")

    deleted_name = user.full_name or user.username
    deleted_id = user.id
    s.delete(user)
    record_activity(
        s,
        actor=actor,
        action_type="user_deleted",
        entity_type="user",
        entity_id=deleted_id,
        entity_name=deleted_name,
        description=f"{actor_name(actor)} deleted user: {deleted_name}",
    )
    s.commit()
    return jsonify({"message": "User deleted successfully"})
