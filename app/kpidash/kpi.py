"""
Helpers shared by the per-channel KPI modules: list filters, payload coercion,
foreign-key checks and row serialization.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from flask import abort
from sqlalchemy.orm import Query, Session

from app.kpidash.modules.clients.models import Client
from app.kpidash.modules.team.models import TeamMember
from app.kpidash.utils import clean_text, parse_bool, parse_date, parse_decimal, parse_int, parse_uuid, row_to_dict


@dataclass(frozen=True)
class KpiFilters:
    start_date: date | None = None
    end_date: date | None = None
    client_id: uuid.UUID | None = None
    team_member_id: uuid.UUID | None = None


def parse_kpi_filters(args) -> KpiFilters:
    """
    Read startDate / endDate / clientId / teamMemberId query args.
    Malformed values are a client error (400).
    """
    try:
        return KpiFilters(
            start_date=parse_date(args.get("startDate")),
            end_date=parse_date(args.get("endDate")),
            client_id=parse_uuid(args.get("clientId")),
            team_member_id=parse_uuid(args.get("teamMemberId")),
        )
    except ValueError as e:
        abort(400, description=f"Invalid filter: {e}")


def apply_kpi_filters(q: Query, model, filters: KpiFilters) -> Query:
    if filters.start_date:
        q = q.filter(model.date >= filters.start_date)
    if filters.end_date:
        q = q.filter(model.date <= filters.end_date)
    if filters.client_id and hasattr(model, "client_id"):
        q = q.filter(model.client_id == filters.client_id)
    if filters.team_member_id:
        q = q.filter(model.team_member_id == filters.team_member_id)
    return q


_COERCERS: dict[str, Callable[[Any], Any]] = {
    "int": parse_int,
    "decimal": parse_decimal,
    "bool": parse_bool,
    "text": clean_text,
    "uuid": parse_uuid,
    "date": parse_date,
}


def coerce_payload(payload: dict, fields: dict[str, str]) -> tuple[dict[str, Any], list[str]]:
    """
    Coerce the named fields of a JSON payload.

    fields maps field name → kind ("int", "decimal", "bool", "text", "uuid", "date").
    Returns (values, errors). Every field is present in values; absent or invalid ones are None (False for bool).
    """
    values: dict[str, Any] = {}
    errors: list[str] = []
    for name, kind in fields.items():
        try:
            values[name] = _COERCERS[kind](payload.get(name))
        except (ValueError, TypeError):
            values[name] = None
            errors.append(f"Invalid value for {name}.")
    return values, errors


def check_range(values: dict[str, Any], name: str, lo: float, hi: float, errors: list[str]) -> None:
    v = values.get(name)
    if v is not None and not (lo <= v <= hi):
        errors.append(f"{name} must be between {lo:g} and {hi:g}.")


def check_non_negative(values: dict[str, Any], names: tuple[str, ...], errors: list[str]) -> None:
    for name in names:
        v = values.get(name)
        if v is not None and v < 0:
            errors.append(f"{name} must not be negative.")


def check_client_and_member(s: Session, values: dict[str, Any], errors: list[str]) -> Client | None:
    """Validate client_id (required) and team_member_id (optional) point at existing rows."""
    client = None
    if values.get("client_id") is None:
        errors.append("client_id is required.")
    else:
        client = s.get(Client, values["client_id"])
        if client is None:
            errors.append("Client not found.")
    if values.get("team_member_id") is not None and s.get(TeamMember, values["team_member_id"]) is None:
        errors.append("Team member not found.")
    return client


def kpi_to_dict(row) -> dict[str, Any]:
    out = row_to_dict(row)
    client = getattr(row, "client", None)
    if hasattr(row, "client_id"):
        out["client_name"] = client.name if client else None
    member = getattr(row, "team_member", None)
    out["team_member_name"] = member.name if member else None
    return out


def client_label(client: Client | None) -> str:
    return client.name if client else "Unknown Client"


def as_float(v: Any) -> float:
    return float(v) if v is not None else 0.0
