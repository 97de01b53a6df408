from __future__ import annotations

import uuid

from flask import Blueprint, abort, jsonify, request

from app.kpidash.constants import WRITE_ROLES
from app.kpidash.db import db_session
from app.kpidash.kpi import kpi_to_dict, parse_kpi_filters
from app.kpidash.modules.social_media.models import SocialMediaKpi
from app.kpidash.modules.social_media.service import (
    create_social_media,
    delete_social_media,
    list_social_media,
    summarize_social_media,
    update_social_media,
    validate_social_media_payload,
)
from app.kpidash.rbac import current_user, require_auth, require_role
from app.kpidash.utils import json_object

bp = Blueprint("social_media", __name__)
bp.before_request(require_auth)


def _get_row_or_404(s, kpi_id: uuid.UUID) -> SocialMediaKpi:
    row = s.get(SocialMediaKpi, kpi_id)
    if not row:
        abort(404, description="Social media KPI not found")
    return row


def _validated_payload(s):
    values, errors = validate_social_media_payload(s, json_object())
    if errors:
        abort(400, description=errors[0])
    return values


@bp.get("/", strict_slashes=False)
def social_media_list():
    s = db_session()
    rows = list_social_media(s, parse_kpi_filters(request.args))
    return jsonify([kpi_to_dict(r) for r in rows])


@bp.get("/summary")
def social_media_summary():
    s = db_session()
    rows = list_social_media(s, parse_kpi_filters(request.args))
    return jsonify(summarize_social_media(rows))


@bp.post("/", strict_slashes=False)
@require_role(*WRITE_ROLES)
def social_media_create():
    s = db_session()
    row = create_social_media(s, _validated_payload(s), current_user())
    s.commit()
    return jsonify(kpi_to_dict(row)), 201


@bp.put("/<uuid:kpi_id>")
@require_role(*WRITE_ROLES)
def social_media_update(kpi_id: uuid.UUID):
    s = db_session()
    row = _get_row_or_404(s, kpi_id)
    row = update_social_media(s, row, _validated_payload(s), current_user())
    s.commit()
    return jsonify(kpi_to_dict(row))


@bp.delete("/<uuid:kpi_id>")
@require_role(*WRITE_ROLES)
def social_media_delete(kpi_id: uuid.UUID):
    s = db_session()
    delete_social_media(s, _get_row_or_404(s, kpi_id), current_user())
    s.commit()
    return jsonify({"message": "Social media KPI deleted successfully"})
