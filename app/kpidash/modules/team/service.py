from __future__ import annotations

import re
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, update

from app.kpidash.activity import actor_name, record_activity
from app.kpidash.modules.team.models import TeamMember
from app.kpidash.utils import row_to_dict, text_value

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.kpidash.models import User

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def member_to_dict(member: TeamMember) -> dict:
    return row_to_dict(member)


def validate_member_payload(payload: dict) -> list[str]:
    errors = []
    try:
        name = text_value(payload.get("name"))
        email = text_value(payload.get("email"))
    except ValueError:
        return ["Team member name and email must be text"]
    if not name:
        errors.append("Team member name is required")
    elif len(name) > 255:
        errors.append("Team member name is too long")
    if email and not _EMAIL_RE.match(email):
        errors.append("Invalid email address")
    return errors


def list_members(s: "Session") -> list[TeamMember]:
    return s.query(TeamMember).order_by(TeamMember.name.asc()).all()


def create_member(s: "Session", payload: dict, user: "User") -> TeamMember:
    now = datetime.utcnow()
    member = TeamMember(
        name=text_value(payload.get("name")),
        email=text_value(payload.get("email")) or None,
        created_at=now,
        updated_at=now,
    )
    s.add(member)
    s.flush()
    record_activity(
        s,
        actor=user,
        action_type="team_member_added",
        entity_type="team_member",
        entity_id=member.id,
        entity_name=member.name,
        description=f"{actor_name(user)} added new team member: {member.name}",
    )
    return member


def update_member(s: "Session", member: TeamMember, payload: dict, user: "User") -> TeamMember:
    member.name = text_value(payload.get("name"))
    member.email = text_value(payload.get("email")) or None
    member.updated_at = datetime.utcnow()
    record_activity(
        s,
        actor=user,
        action_type="team_member_edited",
        entity_type="team_member",
        entity_id=member.id,
        entity_name=member.name,
        description=f"{actor_name(user)} edited team member: {member.name}",
    )
    return member


def delete_member_cascade(s: "Session", member: TeamMember, user: "User") -> dict:
    """
    Remove a team member.

    Their team_kpis rows go with them; channel KPI rows keep their data but lose
    the member reference (team_member_id set NULL, id dropped from the SEO
    team_member_ids list). Runs on the caller's transaction.
    """
    from app.kpidash.modules.ads.models import AdsKpi
    from app.kpidash.modules.client_responses.models import ClientResponse
    from app.kpidash.modules.email_marketing.models import EmailMarketingKpi
    from app.kpidash.modules.social_media.models import SocialMediaKpi
    from app.kpidash.modules.team_kpis.models import TeamKpi
    from app.kpidash.modules.website_seo.models import WebsiteSeoKpi

    snapshot = member_to_dict(member)

    s.execute(delete(TeamKpi).where(TeamKpi.team_member_id == member.id).execution_options(synchronize_session="fetch"))
    for model in (SocialMediaKpi, WebsiteSeoKpi, AdsKpi, EmailMarketingKpi, ClientResponse):
        s.execute(
            update(model)
            .where(model.team_member_id == member.id)
            .values(team_member_id=None)
            .execution_options(synchronize_session="fetch")
        )

    # JSON list membership can't be filtered portably; scan the non-empty lists.
    member_key = str(member.id)
    for row in s.query(WebsiteSeoKpi).filter(WebsiteSeoKpi.team_member_ids.isnot(None)).all():
        ids = list(row.team_member_ids or [])
        if member_key in ids:
            row.team_member_ids = [i for i in ids if i != member_key]

    s.delete(member)
    record_activity(
        s,
        actor=user,
        action_type="team_member_deleted",
        entity_type="team_member",
        entity_id=member.id,
        entity_name=member.name,
        description=f"{actor_name(user)} deleted team member: {member.name}",
    )
    return snapshot
