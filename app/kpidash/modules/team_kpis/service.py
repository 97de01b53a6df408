from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.kpidash.activity import actor_name, record_activity
from app.kpidash.constants import TAB_TEAM
from app.kpidash.kpi import KpiFilters, apply_kpi_filters, as_float, check_non_negative, check_range, coerce_payload, kpi_to_dict
from app.kpidash.modules.team.models import TeamMember
from app.kpidash.modules.team_kpis.models import TeamKpi
from app.kpidash.utils import mean

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kpidash.models import User

FIELDS = {
    "team_member_id": "uuid",
    "date": "date",
    "tasks_assigned": "int",
    "tasks_completed": "int",
    "quality_score": "decimal",
    "responsibility_score": "decimal",
    "punctuality_score": "decimal",
}

SCORE_FIELDS = ("quality_score", "responsibility_score", "punctuality_score")


def validate_team_kpi_payload(s: "Session", payload: dict) -> tuple[dict[str, Any], list[str]]:
    values, errors = coerce_payload(payload, FIELDS)
    if values["date"] is None:
        errors.append("date is required.")
    check_non_negative(values, ("tasks_assigned", "tasks_completed"), errors)
    for name in SCORE_FIELDS:
        check_range(values, name, 0, 10, errors)
    if errors:
        return values, errors

    if values["team_member_id"] is None:
        errors.append("team_member_id is required.")
    elif s.get(TeamMember, values["team_member_id"]) is None:
        errors.append("Team member not found.")
    return values, errors


def team_kpi_to_dict(row: TeamKpi) -> dict[str, Any]:
    out = kpi_to_dict(row)
    out["email"] = row.team_member.email if row.team_member else None
    return out


def list_team_kpis(s: "Session", filters: KpiFilters) -> list[TeamKpi]:
    q = apply_kpi_filters(s.query(TeamKpi), TeamKpi, filters)
    return q.order_by(TeamKpi.date.desc(), TeamKpi.created_at.desc()).all()


def _entity_name(row: TeamKpi) -> str:
    member = row.team_member.name if row.team_member else "Unknown Member"
    return f"{member} - KPI"


def _log(s: "Session", row_id, name: str, action: str, verb: str, user: "User") -> None:
    record_activity(
        s,
        actor=user,
        action_type=action,
        entity_type="team_kpi",
        entity_id=row_id,
        entity_name=name,
        tab_name=TAB_TEAM,
        description=f"{actor_name(user)} {verb} team KPI for {name}",
    )


def create_team_kpi(s: "Session", values: dict[str, Any], user: "User") -> TeamKpi:
    now = datetime.utcnow()
    row = TeamKpi(**values, created_at=now, updated_at=now)
    s.add(row)
    s.flush()
    s.refresh(row)
    _log(s, row.id, _entity_name(row), "data_added", "added", user)
    return row


def update_team_kpi(s: "Session", row: TeamKpi, values: dict[str, Any], user: "User") -> TeamKpi:
    for k, v in values.items():
        setattr(row, k, v)
    row.updated_at = datetime.utcnow()
    s.flush()
    s.refresh(row)
    _log(s, row.id, _entity_name(row), "data_edited", "edited", user)
    return row


def delete_team_kpi(s: "Session", row: TeamKpi, user: "User") -> None:
    name = _entity_name(row)
    row_id = row.id
    s.delete(row)
    _log(s, row_id, name, "data_deleted", "deleted", user)


def _completion_rate(assigned: int, completed: int) -> float:
    return round(completed / assigned * 100, 2) if assigned else 0.0


def _aggregate(rows: list[TeamKpi]) -> dict[str, Any]:
    assigned = sum(r.tasks_assigned or 0 for r in rows)
    completed = sum(r.tasks_completed or 0 for r in rows)
    out: dict[str, Any] = {
        "entries": len(rows),
        "total_tasks_assigned": assigned,
        "total_tasks_completed": completed,
        "completion_rate": _completion_rate(assigned, completed),
    }
    for name in SCORE_FIELDS:
        out[f"avg_{name}"] = round(mean([as_float(getattr(r, name)) for r in rows if getattr(r, name) is not None]), 2)
    return out


def summarize_team_kpis(rows: list[TeamKpi]) -> dict[str, Any]:
    by_member: dict[str, list[TeamKpi]] = defaultdict(list)
    for r in rows:
        by_member[str(r.team_member_id)].append(r)

    members = []
    for member_id, items in by_member.items():
        agg = _aggregate(items)
        agg["team_member_id"] = member_id
        agg["team_member_name"] = items[0].team_member.name if items[0].team_member else None
        members.append(agg)
    members.sort(key=lambda m: (m["team_member_name"] or "").lower())

    out = _aggregate(rows)
    out["active_members"] = len(by_member)
    out["members"] = members
    return out
