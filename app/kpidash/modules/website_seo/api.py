from __future__ import annotations

import uuid

from flask import Blueprint, abort, jsonify, request

from app.kpidash.constants import WRITE_ROLES
from app.kpidash.db import db_session
from app.kpidash.kpi import parse_kpi_filters
from app.kpidash.modules.website_seo.models import WebsiteSeoKpi
from app.kpidash.modules.website_seo.service import (
    create_website_seo,
    delete_website_seo,
    list_website_seo,
    member_names,
    summarize_website_seo,
    update_website_seo,
    validate_website_seo_payload,
    website_seo_to_dict,
)
from app.kpidash.rbac import current_user, require_auth, require_role
from app.kpidash.utils import json_object

bp = Blueprint("website_seo", __name__)
bp.before_request(require_auth)


def _get_row_or_404(s, kpi_id: uuid.UUID) -> WebsiteSeoKpi:
    row = s.get(WebsiteSeoKpi, kpi_id)
    if not row:
        abort(404, description="Website SEO KPI not found")
    return row


def _validated_payload(s):
    values, errors = validate_website_seo_payload(s, json_object())
    if errors:
        abort(400, description=errors[0])
    return values


@bp.get("/", strict_slashes=False)
def website_seo_list():
    s = db_session()
    rows = list_website_seo(s, parse_kpi_filters(request.args))
    names = member_names(s)
    return jsonify([website_seo_to_dict(r, names) for r in rows])


@bp.get("/summary")
def website_seo_summary():
    s = db_session()
    rows = list_website_seo(s, parse_kpi_filters(request.args))
    return jsonify(summarize_website_seo(rows))


@bp.post("/", strict_slashes=False)
@require_role(*WRITE_ROLES)
def website_seo_create():
    s = db_session()
    row = create_website_seo(s, _validated_payload(s), current_user())
    s.commit()
    return jsonify(website_seo_to_dict(row, member_names(s))), 201


@bp.put("/<uuid:kpi_id>")
@require_role(*WRITE_ROLES)
def website_seo_update(kpi_id: uuid.UUID):
    s = db_session()
    row = _get_row_or_404(s, kpi_id)
    row = update_website_seo(s, row, _validated_payload(s), current_user())
    s.commit()
    return jsonify(website_seo_to_dict(row, member_names(s)))


@bp.delete("/<uuid:kpi_id>")
@require_role(*WRITE_ROLES)
def website_seo_delete(kpi_id: uuid.UUID):
    s = db_session()
    delete_website_seo(s, _get_row_or_404(s, kpi_id), current_user())
    s.commit()
    return jsonify({"message": "Website SEO KPI deleted successfully"})
