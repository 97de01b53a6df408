from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.kpidash.activity import actor_name, record_activity
from app.kpidash.constants import TAB_CLIENT_RESPONSES
from app.kpidash.kpi import (
    KpiFilters,
    apply_kpi_filters,
    check_client_and_member,
    check_range,
    client_label,
    coerce_payload,
)
from app.kpidash.modules.client_responses.models import ClientResponse
from app.kpidash.utils import mean

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kpidash.models import User

FIELDS = {
    "client_id": "uuid",
    "team_member_id": "uuid",
    "date": "date",
    "review_rating": "int",
    "review_comment": "text",
    "miscellaneous_work": "text",
}


def validate_response_payload(s: "Session", payload: dict) -> tuple[dict[str, Any], list[str]]:
    values, errors = coerce_payload(payload, FIELDS)
    if values["date"] is None:
        errors.append("date is required.")
    # 0 means "no review this period"
    check_range(values, "review_rating", 0, 5, errors)
    if not errors:
        check_client_and_member(s, values, errors)
    return values, errors


def list_responses(s: "Session", filters: KpiFilters) -> list[ClientResponse]:
    q = apply_kpi_filters(s.query(ClientResponse), ClientResponse, filters)
    return q.order_by(ClientResponse.date.desc(), ClientResponse.created_at.desc()).all()


def _entity_name(row: ClientResponse) -> str:
    return f"{client_label(row.client)} - Response"


def _log(s: "Session", row_id, name: str, action: str, verb: str, user: "User") -> None:
    record_activity(
        s,
        actor=user,
        action_type=action,
        entity_type="client_response",
        entity_id=row_id,
        entity_name=name,
        tab_name=TAB_CLIENT_RESPONSES,
        description=f"{actor_name(user)} {verb} client response for {name}",
    )


def create_response(s: "Session", values: dict[str, Any], user: "User") -> ClientResponse:
    now = datetime.utcnow()
    row = ClientResponse(**values, created_at=now, updated_at=now)
    s.add(row)
    s.flush()
    s.refresh(row)
    _log(s, row.id, _entity_name(row), "data_added", "added", user)
    return row


def update_response(s: "Session", row: ClientResponse, values: dict[str, Any], user: "User") -> ClientResponse:
    for k, v in values.items():
        setattr(row, k, v)
    row.updated_at = datetime.utcnow()
    s.flush()
    s.refresh(row)
    _log(s, row.id, _entity_name(row), "data_edited", "edited", user)
    return row


def delete_response(s: "Session", row: ClientResponse, user: "User") -> None:
    name = _entity_name(row)
    row_id = row.id
    s.delete(row)
    _log(s, row_id, name, "data_deleted", "deleted", user)


def summarize_responses(rows: list[ClientResponse]) -> dict[str, Any]:
    rated = [r.review_rating for r in rows if r.review_rating]
    distribution = {str(star): 0 for star in range(1, 6)}
    for rating in rated:
        distribution[str(rating)] += 1
    return {
        "entries": len(rows),
        "total_reviews": len(rated),
        "avg_rating": round(mean([float(x) for x in rated]), 2),
        "total_misc_work": sum(1 for r in rows if (r.miscellaneous_work or "").strip()),
        "rating_distribution": distribution,
    }
