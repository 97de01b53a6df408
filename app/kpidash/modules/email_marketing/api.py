from __future__ import annotations

import uuid

from flask import Blueprint, abort, jsonify, request

from app.kpidash.constants import WRITE_ROLES
from app.kpidash.db import db_session
from app.kpidash.kpi import kpi_to_dict, parse_kpi_filters
from app.kpidash.modules.email_marketing.models import EmailMarketingKpi
from app.kpidash.modules.email_marketing.service import (
    create_email,
    delete_email,
    list_email,
    summarize_email,
    update_email,
    validate_email_payload,
)
from app.kpidash.rbac import current_user, require_auth, require_role
from app.kpidash.utils import json_object

bp = Blueprint("email_marketing", __name__)
bp.before_request(require_auth)


def _get_row_or_404(s, kpi_id: uuid.UUID) -> EmailMarketingKpi:
    row = s.get(EmailMarketingKpi, kpi_id)
    if not row:
        abort(404, description="Email marketing KPI not found")
    return row


def _validated_payload(s):
    values, errors = validate_email_payload(s, json_object())
    if errors:
        abort(400, description=errors[0])
    return values


@bp.get("/", strict_slashes=False)
def email_list():
    s = db_session()
    rows = list_email(s, parse_kpi_filters(request.args))
    return jsonify([kpi_to_dict(r) for r in rows])


@bp.get("/summary")
def email_summary():
    s = db_session()
    rows = list_email(s, parse_kpi_filters(request.args))
    return jsonify(summarize_email(rows))


@bp.post("/", strict_slashes=False)
@require_role(*WRITE_ROLES)
def email_create():
    s = db_session()
    row = create_email(s, _validated_payload(s), current_user())
    s.commit()
    return jsonify(kpi_to_dict(row)), 201


@bp.put("/<uuid:kpi_id>")
@require_role(*WRITE_ROLES)
def email_update(kpi_id: uuid.UUID):
    s = db_session()
    row = _get_row_or_404(s, kpi_id)
    row = update_email(s, row, _validated_payload(s), current_user())
    s.commit()
    return jsonify(kpi_to_dict(row))


@bp.delete("/<uuid:kpi_id>")
@require_role(*WRITE_ROLES)
def email_delete(kpi_id: uuid.UUID):
    s = db_session()
    delete_email(s, _get_row_or_404(s, kpi_id), current_user())
    s.commit()
    return jsonify({"message": "Email marketing KPI deleted successfully"})
