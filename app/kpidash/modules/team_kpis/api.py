from __future__ import annotations

import uuid

from flask import Blueprint, abort, jsonify, request

from app.kpidash.constants import WRITE_ROLES
from app.kpidash.db import db_session
from app.kpidash.kpi import parse_kpi_filters
from app.kpidash.modules.team_kpis.models import TeamKpi
from app.kpidash.modules.team_kpis.service import (
    create_team_kpi,
    delete_team_kpi,
    list_team_kpis,
    summarize_team_kpis,
    team_kpi_to_dict,
    update_team_kpi,
    validate_team_kpi_payload,
)
from app.kpidash.rbac import current_user, require_auth, require_role
from app.kpidash.utils import json_object

bp = Blueprint("team_kpis", __name__)
bp.before_request(require_auth)


def _get_row_or_404(s, kpi_id: uuid.UUID) -> TeamKpi:
    row = s.get(TeamKpi, kpi_id)
    if not row:
        abort(404, description="Team KPI not found")
    return row


def _validated_payload(s):
    values, errors = validate_team_kpi_payload(s, json_object())
    if errors:
        abort(400, description=errors[0])
    return values


@bp.get("/", strict_slashes=False)
def team_kpis_list():
    s = db_session()
    rows = list_team_kpis(s, parse_kpi_filters(request.args))
    return jsonify([team_kpi_to_dict(r) for r in rows])


@bp.get("/summary")
def team_kpis_summary():
    s = db_session()
    rows = list_team_kpis(s, parse_kpi_filters(request.args))
    return jsonify(summarize_team_kpis(rows))


@bp.post("/", strict_slashes=False)
@require_role(*WRITE_ROLES)
def team_kpis_create():
    s = db_session()
    row = create_team_kpi(s, _validated_payload(s), current_user())
    s.commit()
    return jsonify(team_kpi_to_dict(row)), 201


@bp.put("/<uuid:kpi_id>")
@require_role(*WRITE_ROLES)
def team_kpis_update(kpi_id: uuid.UUID):
    s = db_session()
    row = _get_row_or_404(s, kpi_id)
    row = update_team_kpi(s, row, _validated_payload(s), current_user())
    s.commit()
    return jsonify(team_kpi_to_dict(row))


@bp.delete("/<uuid:kpi_id>")
@require_role(*WRITE_ROLES)
def team_kpis_delete(kpi_id: uuid.UUID):
    s = db_session()
    delete_team_kpi(s, _get_row_or_404(s, kpi_id), current_user())
    s.commit()
    return jsonify({"message": "Team KPI deleted successfully"})
