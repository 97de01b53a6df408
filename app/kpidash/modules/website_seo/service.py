from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.kpidash.activity import actor_name, record_activity
from app.kpidash.constants import TAB_WEBSITE_SEO
from app.kpidash.kpi import (
    KpiFilters,
    apply_kpi_filters,
    as_float,
    check_client_and_member,
    check_non_negative,
    check_range,
    client_label,
    coerce_payload,
    kpi_to_dict,
)
from app.kpidash.modules.team.models import TeamMember
from app.kpidash.modules.website_seo.models import WebsiteSeoKpi
from app.kpidash.utils import mean, parse_uuid

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kpidash.models import User

FIELDS = {
    "client_id": "uuid",
    "team_member_id": "uuid",
    "date": "date",
    "changes_asked": "int",
    "blogs_posted": "int",
    "updates": "int",
    "ranking_issues": "bool",
    "ranking_issues_description": "text",
    "reports_sent": "bool",
    "backlinks": "int",
    "domain_authority": "decimal",
    "page_authority": "decimal",
    "keyword_pass": "int",
    "site_health": "decimal",
    "issues": "int",
}

COUNT_FIELDS = ("changes_asked", "blogs_posted", "updates", "backlinks", "keyword_pass", "issues")


def _member_ids(s: "Session", raw: Any, errors: list[str]) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        errors.append("team_member_ids must be a list.")
        return []
    ids: list[str] = []
    for item in raw:
        try:
            member_id = parse_uuid(item)
        except (ValueError, TypeError):
            errors.append("Invalid value for team_member_ids.")
            return []
        if member_id is None or str(member_id) in ids:
            continue
        if s.get(TeamMember, member_id) is None:
            errors.append("Team member not found.")
            return []
        ids.append(str(member_id))
    return ids


def validate_website_seo_payload(s: "Session", payload: dict) -> tuple[dict[str, Any], list[str]]:
    values, errors = coerce_payload(payload, FIELDS)
    if values["date"] is None:
        errors.append("date is required.")
    check_non_negative(values, COUNT_FIELDS, errors)
    for name in ("domain_authority", "page_authority", "site_health"):
        check_range(values, name, 0, 100, errors)

    ids = _member_ids(s, payload.get("team_member_ids"), errors)
    if ids:
        # The first listed member is the primary one.
        values["team_member_id"] = parse_uuid(ids[0])
    elif values["team_member_id"] is not None:
        ids = [str(values["team_member_id"])]
    values["team_member_ids"] = ids

    if not errors:
        check_client_and_member(s, values, errors)
    return values, errors


def list_website_seo(s: "Session", filters: KpiFilters) -> list[WebsiteSeoKpi]:
    q = apply_kpi_filters(s.query(WebsiteSeoKpi), WebsiteSeoKpi, filters)
    return q.order_by(WebsiteSeoKpi.date.desc(), WebsiteSeoKpi.created_at.desc()).all()


def _entity_name(row: WebsiteSeoKpi) -> str:
    return f"{client_label(row.client)} - SEO"


def _log(s: "Session", row_id, name: str, action: str, verb: str, user: "User") -> None:
    record_activity(
        s,
        actor=user,
        action_type=action,
        entity_type="website_seo_kpi",
        entity_id=row_id,
        entity_name=name,
        tab_name=TAB_WEBSITE_SEO,
        description=f"{actor_name(user)} {verb} website SEO data for {name}",
    )


def create_website_seo(s: "Session", values: dict[str, Any], user: "User") -> WebsiteSeoKpi:
    now = datetime.utcnow()
    row = WebsiteSeoKpi(**values, created_at=now, updated_at=now)
    s.add(row)
    s.flush()
    s.refresh(row)
    _log(s, row.id, _entity_name(row), "data_added", "added", user)
    return row


def update_website_seo(s: "Session", row: WebsiteSeoKpi, values: dict[str, Any], user: "User") -> WebsiteSeoKpi:
    for k, v in values.items():
        setattr(row, k, v)
    row.updated_at = datetime.utcnow()
    s.flush()
    s.refresh(row)
    _log(s, row.id, _entity_name(row), "data_edited", "edited", user)
    return row


def delete_website_seo(s: "Session", row: WebsiteSeoKpi, user: "User") -> None:
    name = _entity_name(row)
    row_id = row.id
    s.delete(row)
    _log(s, row_id, name, "data_deleted", "deleted", user)


def website_seo_to_dict(row: WebsiteSeoKpi, names: dict[str, str]) -> dict[str, Any]:
    out = kpi_to_dict(row)
    out["team_member_names"] = [names.get(i, "Unknown") for i in (row.team_member_ids or [])]
    return out


def member_names(s: "Session") -> dict[str, str]:
    return {str(m.id): m.name for m in s.query(TeamMember).all()}


def summarize_website_seo(rows: list[WebsiteSeoKpi]) -> dict[str, Any]:
    def _avg(name: str) -> float:
        return round(mean([as_float(getattr(r, name)) for r in rows if getattr(r, name) is not None]), 2)

    return {
        "entries": len(rows),
        "total_blogs": sum(r.blogs_posted or 0 for r in rows),
        "total_backlinks": sum(r.backlinks or 0 for r in rows),
        "total_changes": sum(r.changes_asked or 0 for r in rows),
        "total_updates": sum(r.updates or 0 for r in rows),
        "total_issues": sum(r.issues or 0 for r in rows),
        "avg_domain_authority": _avg("domain_authority"),
        "avg_page_authority": _avg("page_authority"),
        "avg_site_health": _avg("site_health"),
        "reports_sent_count": sum(1 for r in rows if r.reports_sent),
        "ranking_issues_count": sum(1 for r in rows if r.ranking_issues),
    }
