from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.kpidash.activity import actor_name, record_activity
from app.kpidash.constants import ADS_PLATFORMS, TAB_ADS
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
from app.kpidash.modules.ads.models import AdsKpi
from app.kpidash.utils import mean

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kpidash.models import User

FIELDS = {
    "client_id": "uuid",
    "team_member_id": "uuid",
    "date": "date",
    "platform": "text",
    "cost_per_lead": "decimal",
    "quality_of_ads": "decimal",
    "lead_quality": "decimal",
    "closing_ratio": "decimal",
    "quantity_leads": "int",
    "keyword_refinement": "decimal",
    "cost_per_click": "decimal",
    "conversions": "int",
    "closing": "int",
    "tracking": "int",
}

SCORE_FIELDS = ("quality_of_ads", "lead_quality", "keyword_refinement")
AVERAGED_FIELDS = ("cost_per_lead", "cost_per_click") + SCORE_FIELDS + ("closing_ratio",)


def validate_ads_payload(s: "Session", payload: dict) -> tuple[dict[str, Any], list[str]]:
    values, errors = coerce_payload(payload, FIELDS)
    if values["date"] is None:
        errors.append("date is required.")
    if values["platform"] not in ADS_PLATFORMS:
        errors.append(f"platform must be one of: {', '.join(ADS_PLATFORMS)}.")
    for name in SCORE_FIELDS:
        check_range(values, name, 0, 10, errors)
    check_range(values, "closing_ratio", 0, 100, errors)
    check_non_negative(
        values,
        ("cost_per_lead", "cost_per_click", "quantity_leads", "conversions", "closing", "tracking"),
        errors,
    )
    if not errors:
        check_client_and_member(s, values, errors)
    return values, errors


def list_ads(s: "Session", filters: KpiFilters) -> list[AdsKpi]:
    q = apply_kpi_filters(s.query(AdsKpi), AdsKpi, filters)
    return q.order_by(AdsKpi.date.desc(), AdsKpi.created_at.desc()).all()


def _entity_name(row: AdsKpi) -> str:
    return f"{client_label(row.client)} - {row.platform}"


def _log(s: "Session", row_id, name: str, action: str, verb: str, user: "User") -> None:
    record_activity(
        s,
        actor=user,
        action_type=action,
        entity_type="ads_kpi",
        entity_id=row_id,
        entity_name=name,
        tab_name=TAB_ADS,
        description=f"{actor_name(user)} {verb} ads data for {name}",
    )


def create_ads(s: "Session", values: dict[str, Any], user: "User") -> AdsKpi:
    now = datetime.utcnow()
    row = AdsKpi(**values, created_at=now, updated_at=now)
    s.add(row)
    s.flush()
    s.refresh(row)
    _log(s, row.id, _entity_name(row), "data_added", "added", user)
    return row


def update_ads(s: "Session", row: AdsKpi, values: dict[str, Any], user: "User") -> AdsKpi:
    for k, v in values.items():
        setattr(row, k, v)
    row.updated_at = datetime.utcnow()
    s.flush()
    s.refresh(row)
    _log(s, row.id, _entity_name(row), "data_edited", "edited", user)
    return row


def delete_ads(s: "Session", row: AdsKpi, user: "User") -> None:
    name = _entity_name(row)
    row_id = row.id
    s.delete(row)
    _log(s, row_id, name, "data_deleted", "deleted", user)


def summarize_ads(rows: list[AdsKpi]) -> dict[str, Any]:
    """Per-platform totals and averages; platforms without rows report zeros."""
    by_platform: dict[str, list[AdsKpi]] = defaultdict(list)
    for r in rows:
        by_platform[r.platform].append(r)

    platforms: dict[str, dict[str, Any]] = {}
    for platform in ADS_PLATFORMS:
        items = by_platform.get(platform, [])
        agg: dict[str, Any] = {
            "entries": len(items),
            "total_leads": sum(r.quantity_leads or 0 for r in items),
            "total_conversions": sum(r.conversions or 0 for r in items),
            "total_closings": sum(r.closing or 0 for r in items),
            "total_tracking": sum(r.tracking or 0 for r in items),
        }
        for name in AVERAGED_FIELDS:
            agg[f"avg_{name}"] = round(
                mean([as_float(getattr(r, name)) for r in items if getattr(r, name) is not None]), 2
            )
        platforms[platform] = agg

    return {"entries": len(rows), "platforms": platforms}
