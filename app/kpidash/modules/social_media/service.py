from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.kpidash.activity import actor_name, record_activity
from app.kpidash.constants import SOCIAL_MEDIA_PLATFORMS, TAB_SOCIAL_MEDIA
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
from app.kpidash.modules.social_media.models import SocialMediaKpi
from app.kpidash.utils import mean

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kpidash.models import User

FIELDS = {
    "client_id": "uuid",
    "team_member_id": "uuid",
    "date": "date",
    "platform": "text",
    "quality_score": "decimal",
    "quantity": "int",
}


def validate_social_media_payload(s: "Session", payload: dict) -> tuple[dict[str, Any], list[str]]:
    values, errors = coerce_payload(payload, FIELDS)
    if values["date"] is None:
        errors.append("date is required.")
    if values["platform"] not in SOCIAL_MEDIA_PLATFORMS:
        errors.append(f"platform must be one of: {', '.join(SOCIAL_MEDIA_PLATFORMS)}.")
    check_range(values, "quality_score", 0, 10, errors)
    check_non_negative(values, ("quantity",), errors)
    if not errors:
        check_client_and_member(s, values, errors)
    return values, errors


def list_social_media(s: "Session", filters: KpiFilters) -> list[SocialMediaKpi]:
    q = apply_kpi_filters(s.query(SocialMediaKpi), SocialMediaKpi, filters)
    return q.order_by(SocialMediaKpi.date.desc(), SocialMediaKpi.created_at.desc()).all()


def _entity_name(row: SocialMediaKpi) -> str:
    return f"{client_label(row.client)} - {row.platform}"


def create_social_media(s: "Session", values: dict[str, Any], user: "User") -> SocialMediaKpi:
    now = datetime.utcnow()
    row = SocialMediaKpi(**values, created_at=now, updated_at=now)
    s.add(row)
    s.flush()
    s.refresh(row)
    record_activity(
        s,
        actor=user,
        action_type="data_added",
        entity_type="social_media_kpi",
        entity_id=row.id,
        entity_name=_entity_name(row),
        tab_name=TAB_SOCIAL_MEDIA,
        description=f"{actor_name(user)} added social media data for {_entity_name(row)}",
    )
    return row


def update_social_media(s: "Session", row: SocialMediaKpi, values: dict[str, Any], user: "User") -> SocialMediaKpi:
    for k, v in values.items():
        setattr(row, k, v)
    row.updated_at = datetime.utcnow()
    s.flush()
    s.refresh(row)
    record_activity(
        s,
        actor=user,
        action_type="data_edited",
        entity_type="social_media_kpi",
        entity_id=row.id,
        entity_name=_entity_name(row),
        tab_name=TAB_SOCIAL_MEDIA,
        description=f"{actor_name(user)} edited social media data for {_entity_name(row)}",
    )
    return row


def delete_social_media(s: "Session", row: SocialMediaKpi, user: "User") -> None:
    name = _entity_name(row)
    row_id = row.id
    s.delete(row)
    record_activity(
        s,
        actor=user,
        action_type="data_deleted",
        entity_type="social_media_kpi",
        entity_id=row_id,
        entity_name=name,
        tab_name=TAB_SOCIAL_MEDIA,
        description=f"{actor_name(user)} deleted social media data for {name}",
    )


def summarize_social_media(rows: list[SocialMediaKpi]) -> dict[str, Any]:
    by_platform: dict[str, list[SocialMediaKpi]] = defaultdict(list)
    for r in rows:
        by_platform[r.platform].append(r)

    def _agg(items: list[SocialMediaKpi]) -> dict[str, Any]:
        return {
            "entries": len(items),
            "total_quantity": sum(r.quantity or 0 for r in items),
            "avg_quality": round(mean([as_float(r.quality_score) for r in items if r.quality_score is not None]), 2),
        }

    out = _agg(rows)
    out["platforms"] = {p: _agg(by_platform.get(p, [])) for p in SOCIAL_MEDIA_PLATFORMS}
    return out
