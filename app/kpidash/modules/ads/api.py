from __future__ import annotations

import uuid

from flask import Blueprint, abort, jsonify, request

from app.kpidash.constants import WRITE_ROLES
from app.kpidash.db import db_session
from app.kpidash.kpi import kpi_to_dict, parse_kpi_filters
from app.kpidash.modules.ads.models import AdsKpi
from app.kpidash.modules.ads.service import (
    create_ads,
    delete_ads,
    list_ads,
    summarize_ads,
    update_ads,
    validate_ads_payload,
)
from app.kpidash.rbac import current_user, require_auth, require_role
from app.kpidash.utils import json_object

bp = Blueprint("ads", __name__)
bp.before_request(require_auth)


def _get_row_or_404(s, kpi_id: uuid.UUID) -> AdsKpi:
    row = s.get(AdsKpi, kpi_id)
    if not row:
        abort(404, description="Ads KPI not found")
    return row


def _validated_payload(s):
    values, errors = validate_ads_payload(s, json_object())
    if errors:
        abort(400, description=errors[0])
    return values


@bp.get("/", strict_slashes=False)
def ads_list():
    s = db_session()
    rows = list_ads(s, parse_kpi_filters(request.args))
    return jsonify([kpi_to_dict(r) for r in rows])


@bp.get("/summary")
def ads_summary():
    s = db_session()
    rows = list_ads(s, parse_kpi_filters(request.args))
    return jsonify(summarize_ads(rows))


@bp.post("/", strict_slashes=False)
@require_role(*WRITE_ROLES)
def ads_create():
    s = db_session()
    row = create_ads(s, _validated_payload(s), current_user())
    s.commit()
    return jsonify(kpi_to_dict(row)), 201


@bp.put("/<uuid:kpi_id>")
@require_role(*WRITE_ROLES)
def ads_update(kpi_id: uuid.UUID):
    s = db_session()
    row = _get_row_or_404(s, kpi_id)
    row = update_ads(s, row, _validated_payload(s), current_user())
    s.commit()
    return jsonify(kpi_to_dict(row))


@bp.delete("/<uuid:kpi_id>")
@require_role(*WRITE_ROLES)
def ads_delete(kpi_id: uuid.UUID):
    s = db_session()
    delete_ads(s, _get_row_or_404(s, kpi_id), current_user())
    s.commit()
    return jsonify({"message": "Ads KPI deleted successfully"})
