from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete

from app.kpidash.activity import actor_name, record_activity
from app.kpidash.modules.clients.models import Client
from app.kpidash.utils import row_to_dict, text_value

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kpidash.models import User


def client_to_dict(client: Client) -> dict:
    return row_to_dict(client)


def validate_client_payload(payload: dict) -> list[str]:
    errors = []
    try:
        name = text_value(payload.get("name"))
    except ValueError:
        return ["Client name must be text"]
    if not name:
        errors.append("Client name is required")
    elif len(name) > 255:
        errors.append("Client name is too long")
    return errors


def list_clients(s: "Session") -> list[Client]:
    return s.query(Client).order_by(Client.name.asc()).all()


def create_client(s: "Session", payload: dict, user: "User") -> Client:
    now = datetime.utcnow()
    client = Client(name=text_value(payload.get("name")), created_at=now, updated_at=now)
    s.add(client)
    s.flush()

    record_activity(
        s,
        actor=user,
        action_type="client_added",
        entity_type="client",
        entity_id=client.id,
        entity_name=client.name,
        description=f"{actor_name(user)} added new client: {client.name}",
    )
    return client


def update_client(s: "Session", client: Client, payload: dict, user: "User") -> Client:
    client.name = text_value(payload.get("name"))
    client.updated_at = datetime.utcnow()

    record_activity(
        s,
        actor=user,
        action_type="client_edited",
        entity_type="client",
        entity_id=client.id,
        entity_name=client.name,
        description=f"{actor_name(user)} edited client: {client.name}",
    )
    return client


def delete_client_cascade(s: "Session", client: Client, user: "User") -> dict:
    """
    Delete a client and every KPI row that references it.

    Runs on the caller's transaction; the caller commits, or rolls back on error
    so either everything goes or nothing does.
    """
    from app.kpidash.modules.ads.models import AdsKpi
    from app.kpidash.modules.client_responses.models import ClientResponse
    from app.kpidash.modules.email_marketing.models import EmailMarketingKpi
    from app.kpidash.modules.social_media.models import SocialMediaKpi
    from app.kpidash.modules.website_seo.models import WebsiteSeoKpi

    snapshot = client_to_dict(client)
    removed: dict[str, int] = {}
    for model in (SocialMediaKpi, WebsiteSeoKpi, AdsKpi, EmailMarketingKpi, ClientResponse):
        result = s.execute(delete(model).where(model.client_id == client.id).execution_options(synchronize_session="fetch"))
        removed[model.__tablename__] = result.rowcount or 0

    s.delete(client)
    record_activity(
        s,
        actor=user,
        action_type="client_deleted",
        entity_type="client",
        entity_id=client.id,
        entity_name=client.name,
        description=f"{actor_name(user)} deleted client: {client.name}",
    )
    snapshot["removed_rows"] = removed
    return snapshot
