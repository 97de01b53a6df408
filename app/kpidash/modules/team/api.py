from __future__ import annotations

import uuid

from flask import Blueprint, abort, current_app, jsonify

from app.kpidash.constants import WRITE_ROLES
from app.kpidash.db import db_session
from app.kpidash.modules.team.models import TeamMember
from app.kpidash.modules.team.service import (
    create_member,
    delete_member_cascade,
    list_members,
    member_to_dict,
    update_member,
    validate_member_payload,
)
from app.kpidash.rbac import current_user, require_auth, require_role
from app.kpidash.utils import json_object

bp = Blueprint("team", __name__)
bp.before_request(require_auth)


def _get_member_or_404(s, member_id: uuid.UUID) -> TeamMember:
    member = s.get(TeamMember, member_id)
    if not member:
        abort(404, description="Team member not found")
    return member


@bp.get("/", strict_slashes=False)
def team_list():
    s = db_session()
    return jsonify([member_to_dict(m) for m in list_members(s)])


@bp.post("/", strict_slashes=False)
@require_role(*WRITE_ROLES)
def team_create():
    s = db_session()
    payload = json_object()
    errors = validate_member_payload(payload)
    if errors:
        abort(400, description=errors[0])

    member = create_member(s, payload, current_user())
    s.commit()
    current_app.logger.info("Team member created: %s (%s)", member.name, member.id)
    return jsonify(member_to_dict(member)), 201


@bp.get("/<uuid:member_id>")
def team_detail(member_id: uuid.UUID):
    s = db_session()
    return jsonify(member_to_dict(_get_member_or_404(s, member_id)))


@bp.put("/<uuid:member_id>")
@require_role(*WRITE_ROLES)
def team_update(member_id: uuid.UUID):
    s = db_session()
    payload = json_object()
    errors = validate_member_payload(payload)
    if errors:
        abort(400, description=errors[0])

    member = _get_member_or_404(s, member_id)
    update_member(s, member, payload, current_user())
    s.commit()
    return jsonify(member_to_dict(member))


@bp.delete("/<uuid:member_id>")
@require_role(*WRITE_ROLES)
def team_delete(member_id: uuid.UUID):
    s = db_session()
    member = _get_member_or_404(s, member_id)
    try:
        deleted = delete_member_cascade(s, member, current_user())
        s.commit()
    except Exception:
        s.rollback()
        current_app.logger.exception("Error deleting team member %s", member_id)
        abort(500, description="Failed to delete team member. Database error occurred.")
    return jsonify({"message": "Team member deleted successfully", "deletedMember": deleted})
