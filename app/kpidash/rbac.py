from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import abort, g, request

from app.kpidash.models import User


def user_has_role(user: User | None, *roles: str) -> bool:
    if not user or not user.is_active:
        return False
    return user.role in roles


def require_auth() -> None:
    """
    Blueprint-level guard (register with bp.before_request).
    No token → 401; bad/expired token or unknown user → 403.
    """
    if request.method == "OPTIONS":
        return None
    user: User | None = getattr(g, "current_user", None)
    if user and user.is_active:
        return None
    if getattr(g, "auth_error", None) == "missing":
        abort(401, description="Access token required")
    abort(403, description="Invalid or expired token")


def require_role(*roles: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(fn)
        def wrapped(*args: Any, **kwargs: Any):
            user: User | None = getattr(g, "current_user", None)
            if not user or not user.is_active:
                require_auth()
            if not user_has_role(user, *roles):
                abort(403, description="Insufficient permissions")
            return fn(*args, **kwargs)

        return wrapped

    return decorator


def current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u
