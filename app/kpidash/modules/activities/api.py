from __future__ import annotations

from flask import Blueprint, abort, jsonify, request

from app.kpidash.constants import ACTIVITY_BY_DATE_DEFAULT_LIMIT, ACTIVITY_DEFAULT_LIMIT
from app.kpidash.db import db_session
from app.kpidash.modules.activities.service import (
    activities_between,
    activity_to_dict,
    mark_all_as_read,
    mark_as_read,
    parse_limit,
    parse_range_bound,
    recent_activities,
    unread_count,
)
from app.kpidash.rbac import require_auth
from app.kpidash.utils import json_object, parse_uuid

bp = Blueprint("activities", __name__)
bp.before_request(require_auth)


def _limit(default: int) -> int:
    try:
        return parse_limit(request.args.get("limit"), default)
    except ValueError:
        abort(400, description="limit must be a positive integer")


@bp.get("/", strict_slashes=False)
def activities_list():
    s = db_session()
    rows = recent_activities(s, _limit(ACTIVITY_DEFAULT_LIMIT))
    return jsonify([activity_to_dict(r) for r in rows])


@bp.get("/unread/count")
def activities_unread_count():
    return jsonify({"unreadCount": unread_count(db_session())})


@bp.post("/mark-as-read")
def activities_mark_as_read():
    payload = json_object()
    raw_ids = payload.get("activityIds")
    if not isinstance(raw_ids, list) or not raw_ids:
        abort(400, description="activityIds array is required")
    try:
        ids = [parse_uuid(i) for i in raw_ids]
    except (ValueError, TypeError):
        abort(400, description="activityIds must be UUIDs")

    s = db_session()
    marked = mark_as_read(s, [i for i in ids if i is not None])
    s.commit()
    return jsonify({"success": True, "markedAsRead": len(marked), "ids": [str(i) for i in marked]})


@bp.post("/mark-all-as-read")
def activities_mark_all_as_read():
    s = db_session()
    count = mark_all_as_read(s)
    s.commit()
    return jsonify({"success": True, "markedAsRead": count})


@bp.get("/by-action/<action_type>")
def activities_by_action(action_type: str):
    s = db_session()
    rows = recent_activities(s, _limit(ACTIVITY_DEFAULT_LIMIT), action_type=action_type)
    return jsonify([activity_to_dict(r) for r in rows])


@bp.get("/by-date")
def activities_by_date():
    try:
        start = parse_range_bound(request.args.get("startDate"), end=False)
        end = parse_range_bound(request.args.get("endDate"), end=True)
    except ValueError:
        abort(400, description="Invalid date range")
    s = db_session()
    rows = activities_between(s, start, end, _limit(ACTIVITY_BY_DATE_DEFAULT_LIMIT))
    return jsonify([activity_to_dict(r) for r in rows])
