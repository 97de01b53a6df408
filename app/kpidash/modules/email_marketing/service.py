from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.kpidash.activity import actor_name, record_activity
from app.kpidash.constants import TAB_EMAIL_MARKETING
from app.kpidash.kpi import (
    KpiFilters,
    apply_kpi_filters,
    as_float,
    check_client_and_member,
    check_non_negative,
    check_range,
    client_label,
    coerce_payload,
)
from app.kpidash.modules.email_marketing.models import EmailMarketingKpi
from app.kpidash.utils import mean

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kpidash.models import User

FIELDS = {
    "client_id": "uuid",
    "team_member_id": "uuid",
    "date": "date",
    "template_quality": "decimal",
    "emails_sent": "int",
    "opening_ratio": "decimal",
}


def validate_email_payload(s: "Session", payload: dict) -> tuple[dict[str, Any], list[str]]:
    values, errors = coerce_payload(payload, FIELDS)
    if values["date"] is None:
        errors.append("date is required.")
    check_range(values, "template_quality", 0, 10, errors)
    check_range(values, "opening_ratio", 0, 100, errors)
    check_non_negative(values, ("emails_sent",), errors)
    if not errors:
        check_client_and_member(s, values, errors)
    return values, errors


def list_email(s: "Session", filters: KpiFilters) -> list[EmailMarketingKpi]:
    q = apply_kpi_filters(s.query(EmailMarketingKpi), EmailMarketingKpi, filters)
    return q.order_by(EmailMarketingKpi.date.desc(), EmailMarketingKpi.created_at.desc()).all()


def _entity_name(row: EmailMarketingKpi) -> str:
    return f"{client_label(row.client)} - Email"


def _log(s: "Session", row_id, name: str, action: str, verb: str, user: "User") -> None:
    record_activity(
        s,
        actor=user,
        action_type=action,
        entity_type="email_marketing_kpi",
        entity_id=row_id,
        entity_name=name,
        tab_name=TAB_EMAIL_MARKETING,
        description=f"{actor_name(user)} {verb} email marketing data for {name}",
    )


def create_email(s: "Session", values: dict[str, Any], user: "User") -> EmailMarketingKpi:
    now = datetime.utcnow()
    row = EmailMarketingKpi(**values, created_at=now, updated_at=now)
    s.add(row)
    s.flush()
    s.refresh(row)
    _log(s, row.id, _entity_name(row), "data_added", "added", user)
    return row


def update_email(s: "Session", row: EmailMarketingKpi, values: dict[str, Any], user: "User") -> EmailMarketingKpi:
    for k, v in values.items():
        setattr(row, k, v)
    row.updated_at = datetime.utcnow()
    s.flush()
    s.refresh(row)
    _log(s, row.id, _entity_name(row), "data_edited", "edited", user)
    return row


def delete_email(s: "Session", row: EmailMarketingKpi, user: "User") -> None:
    name = _entity_name(row)
    row_id = row.id
    s.delete(row)
    _log(s, row_id, name, "data_deleted", "deleted", user)


def summarize_email(rows: list[EmailMarketingKpi]) -> dict[str, Any]:
    # Rows with no opening ratio recorded (null or 0) don't count toward ratio stats.
    ratios = [as_float(r.opening_ratio) for r in rows if r.opening_ratio is not None and r.opening_ratio > 0]
    qualities = [as_float(r.template_quality) for r in rows if r.template_quality is not None]
    return {
        "entries": len(rows),
        "total_emails_sent": sum(r.emails_sent or 0 for r in rows),
        "avg_opening_ratio": round(mean(ratios), 2),
        "best_opening_ratio": max(ratios) if ratios else 0.0,
        "worst_opening_ratio": min(ratios) if ratios else 0.0,
        "avg_template_quality": round(mean(qualities), 2),
    }
