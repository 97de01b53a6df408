from __future__ import annotations

import uuid

from flask import Blueprint, abort, jsonify, request

from app.kpidash.constants import WRITE_ROLES
from app.kpidash.db import db_session
from app.kpidash.kpi import kpi_to_dict, parse_kpi_filters
from app.kpidash.modules.client_responses.models import ClientResponse
from app.kpidash.modules.client_responses.service import (
    create_response,
    delete_response,
    list_responses,
    summarize_responses,
    update_response,
    validate_response_payload,
)
from app.kpidash.rbac import current_user, require_auth, require_role
from app.kpidash.utils import json_object

bp = Blueprint("client_responses", __name__)
bp.before_request(require_auth)


def _get_row_or_404(s, kpi_id: uuid.UUID) -> ClientResponse:
    row = s.get(ClientResponse, kpi_id)
    if not row:
        abort(404, description="Client response not found")
    return row


def _validated_payload(s):
    values, errors = validate_response_payload(s, json_object())
    if errors:
        abort(400, description=errors[0])
    return values


@bp.get("/", strict_slashes=False)
def responses_list():
    s = db_session()
    rows = list_responses(s, parse_kpi_filters(request.args))
    return jsonify([kpi_to_dict(r) for r in rows])


@bp.get("/summary")
def responses_summary():
    s = db_session()
    rows = list_responses(s, parse_kpi_filters(request.args))
    return jsonify(summarize_responses(rows))


@bp.post("/", strict_slashes=False)
@require_role(*WRITE_ROLES)
def responses_create():
    s = db_session()
    row = create_response(s, _validated_payload(s), current_user())
    s.commit()
    return jsonify(kpi_to_dict(row)), 201


@bp.put("/<uuid:kpi_id>")
@require_role(*WRITE_ROLES)
def responses_update(kpi_id: uuid.UUID):
    s = db_session()
    row = _get_row_or_404(s, kpi_id)
    row = update_response(s, row, _validated_payload(s), current_user())
    s.commit()
    return jsonify(kpi_to_dict(row))


@bp.delete("/<uuid:kpi_id>")
@require_role(*WRITE_ROLES)
def responses_delete(kpi_id: uuid.UUID):
    s = db_session()
    delete_response(s, _get_row_or_404(s, kpi_id), current_user())
    s.commit()
    return jsonify({"message": "Client response deleted successfully"})
