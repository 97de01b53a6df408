from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, update

from app.kpidash.constants import ACTIVITY_MAX_LIMIT
from app.kpidash.models import ActivityLog
from app.kpidash.utils import parse_int, to_jsonable

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def parse_limit(raw: Any, default: int) -> int:
    """Positive integer, capped at ACTIVITY_MAX_LIMIT. Raises ValueError."""
    limit = parse_int(raw)
    if limit is None:
        return default
    if limit < 1:
        raise ValueError("limit must be a positive integer")
    return min(limit, ACTIVITY_MAX_LIMIT)


def parse_range_bound(raw: Any, *, end: bool) -> datetime | None:
    """
    Accepts YYYY-MM-DD or a full ISO timestamp.
    A date-only end bound covers that whole day.
    Timestamps with an offset are converted to naive UTC, matching created_at.
    """
    if raw is None or not str(raw).strip():
        return None
    raw = str(raw).strip()
    if len(raw) == 10:
        d = date.fromisoformat(raw)
        start = datetime(d.year, d.month, d.day)
        return start + timedelta(days=1) if end else start
    dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def activity_to_dict(ev: ActivityLog) -> dict[str, Any]:
    return {
        "id": str(ev.id),
        "user_id": to_jsonable(ev.user_id),
        "action_type": ev.action_type,
        "entity_type": ev.entity_type,
        "entity_id": to_jsonable(ev.entity_id),
        "entity_name": ev.entity_name,
        "tab_name": ev.tab_name,
        "description": ev.description,
        "created_at": to_jsonable(ev.created_at),
        "is_read": bool(ev.is_read),
        "user_name": ev.user.full_name if ev.user else None,
    }


def recent_activities(s: "Session", limit: int, action_type: str | None = None) -> list[ActivityLog]:
    q = s.query(ActivityLog)
    if action_type:
        q = q.filter(ActivityLog.action_type == action_type)
    return q.order_by(ActivityLog.created_at.desc()).limit(limit).all()


def activities_between(s: "Session", start: datetime | None, end: datetime | None, limit: int) -> list[ActivityLog]:
    q = s.query(ActivityLog)
    if start:
        q = q.filter(ActivityLog.created_at >= start)
    if end:
        q = q.filter(ActivityLog.created_at < end)
    return q.order_by(ActivityLog.created_at.desc()).limit(limit).all()


def unread_count(s: "Session") -> int:
    return int(s.query(func.count(ActivityLog.id)).filter(ActivityLog.is_read.is_(False)).scalar() or 0)


def mark_as_read(s: "Session", ids: list[uuid.UUID]) -> list[uuid.UUID]:
    found = [row[0] for row in s.query(ActivityLog.id).filter(ActivityLog.id.in_(ids)).all()]
    if found:
        s.execute(
            update(ActivityLog)
            .where(ActivityLog.id.in_(found))
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
    return found


def mark_all_as_read(s: "Session") -> int:
    result = s.execute(
        update(ActivityLog)
        .where(ActivityLog.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount or 0
