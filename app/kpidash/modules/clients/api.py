from __future__ import annotations

import uuid

from flask import Blueprint, abort, current_app, jsonify

from app.kpidash.constants import WRITE_ROLES
from app.kpidash.db import db_session
from app.kpidash.modules.clients.models import Client
from app.kpidash.modules.clients.service import (
    client_to_dict,
    create_client,
    delete_client_cascade,
    list_clients,
    update_client,
    validate_client_payload,
)
from app.kpidash.rbac import current_user, require_auth, require_role
from app.kpidash.utils import json_object

bp = Blueprint("clients", __name__)
bp.before_request(require_auth)


def _get_client_or_404(s, client_id: uuid.UUID) -> Client:
    client = s.get(Client, client_id)
    if not client:
        abort(404, description="Client not found")
    return client


@bp.get("/", strict_slashes=False)
def clients_list():
    s = db_session()
    return jsonify([client_to_dict(c) for c in list_clients(s)])


@bp.post("/", strict_slashes=False)
@require_role(*WRITE_ROLES)
def clients_create():
    s = db_session()
    payload = json_object()
    errors = validate_client_payload(payload)
    if errors:
        abort(400, description=errors[0])

    client = create_client(s, payload, current_user())
    s.commit()
    current_app.logger.info("Client created: %s (%s)", client.name, client.id)
    return jsonify(client_to_dict(client)), 201


@bp.get("/<uuid:client_id>")
def clients_detail(client_id: uuid.UUID):
    s = db_session()
    return jsonify(client_to_dict(_get_client_or_404(s, client_id)))


@bp.put("/<uuid:client_id>")
@require_role(*WRITE_ROLES)
def clients_update(client_id: uuid.UUID):
    s = db_session()
    payload = json_object()
    errors = validate_client_payload(payload)
    if errors:
        abort(400, description=errors[0])

    client = _get_client_or_404(s, client_id)
    update_client(s, client, payload, current_user())
    s.commit()
    return jsonify(client_to_dict(client))


@bp.delete("/<uuid:client_id>")
@require_role(*WRITE_ROLES)
def clients_delete(client_id: uuid.UUID):
    s = db_session()
    client = _get_client_or_404(s, client_id)
    try:
        deleted = delete_client_cascade(s, client, current_user())
        s.commit()
    except Exception:
        s.rollback()
        current_app.logger.exception("Error deleting client %s", client_id)
        abort(500, description="Failed to delete client. Database error occurred.")
    return jsonify({"message": "Client and all related data deleted successfully", "deletedClient": deleted})
