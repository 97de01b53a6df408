"""Initial KPI dashboard schema: users, clients, team members and per-channel KPI tables.

Revision ID: a1c4e7f0b2d3
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "a1c4e7f0b2d3"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def _kpi_refs(member_required: bool = False, with_client: bool = True) -> list:
    cols: list = [sa.Column("id", sa.Uuid(), primary_key=True)]
    if with_client:
        cols.append(sa.Column("client_id", sa.Uuid(), sa.ForeignKey("clients.id"), nullable=False))
    cols.append(sa.Column("team_member_id", sa.Uuid(), sa.ForeignKey("team_members.id"), nullable=not member_required))
    cols.append(sa.Column("date", sa.Date(), nullable=False))
    return cols


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)

    if not insp.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.Uuid(), primary_key=True),
            sa.Column("full_name", sa.String(255), nullable=False),
            sa.Column("username", sa.String(100), nullable=False),
            sa.Column("email", sa.String(255), nullable=False),
            sa.Column("password_hash", sa.String(255), nullable=False),
            sa.Column("role", sa.String(50), nullable=False, server_default="viewer"),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
            *_timestamps(),
            sa.UniqueConstraint("username", name="uq_users_username"),
            sa.UniqueConstraint("email", name="uq_users_email"),
            sa.CheckConstraint("role IN ('admin', 'editor', 'viewer')", name="ck_users_role"),
        )
        op.create_index("idx_users_username", "users", ["username"])
        op.create_index("idx_users_email", "users", ["email"])

    if not insp.has_table("clients"):
        op.create_table(
            "clients",
            sa.Column("id", sa.Uuid(), primary_key=True),
            sa.Column("name", sa.String(255), nullable=False),
            *_timestamps(),
        )
        op.create_index("idx_clients_name", "clients", ["name"])

    if not insp.has_table("team_members"):
        op.create_table(
            "team_members",
            sa.Column("id", sa.Uuid(), primary_key=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("email", sa.String(255), nullable=True),
            *_timestamps(),
        )
        op.create_index("idx_team_members_name", "team_members", ["name"])

    if not insp.has_table("social_media_kpis"):
        op.create_table(
            "social_media_kpis",
            *_kpi_refs(),
            sa.Column("platform", sa.String(50), nullable=False),
            sa.Column("quality_score", sa.Numeric(5, 2), nullable=True),
            sa.Column("quantity", sa.Integer(), nullable=True),
            *_timestamps(),
        )
        op.create_index("idx_social_media_kpis_client_date", "social_media_kpis", ["client_id", "date"])
        op.create_index("idx_social_media_kpis_team_member_id", "social_media_kpis", ["team_member_id"])

    if not insp.has_table("website_seo_kpis"):
        op.create_table(
            "website_seo_kpis",
            *_kpi_refs(),
            sa.Column(
                "team_member_ids",
                sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
                nullable=False,
                server_default=sa.text("'[]'"),
            ),
            sa.Column("changes_asked", sa.Integer(), nullable=True),
            sa.Column("blogs_posted", sa.Integer(), nullable=True),
            sa.Column("updates", sa.Integer(), nullable=True),
            sa.Column("ranking_issues", sa.Boolean(), nullable=False, server_default=sa.text("false")),
            sa.Column("ranking_issues_description", sa.Text(), nullable=True),
            sa.Column("reports_sent", sa.Boolean(), nullable=False, server_default=sa.text("false")),
            sa.Column("backlinks", sa.Integer(), nullable=True),
            sa.Column("domain_authority", sa.Numeric(5, 2), nullable=True),
            sa.Column("page_authority", sa.Numeric(5, 2), nullable=True),
            sa.Column("keyword_pass", sa.Integer(), nullable=True),
            sa.Column("site_health", sa.Numeric(5, 2), nullable=True),
            sa.Column("issues", sa.Integer(), nullable=True),
            *_timestamps(),
        )
        op.create_index("idx_website_seo_kpis_client_date", "website_seo_kpis", ["client_id", "date"])
        op.create_index("idx_website_seo_kpis_team_member_id", "website_seo_kpis", ["team_member_id"])

    if not insp.has_table("ads_kpis"):
        op.create_table(
            "ads_kpis",
            *_kpi_refs(),
            sa.Column("platform", sa.String(50), nullable=False),
            sa.Column("cost_per_lead", sa.Numeric(10, 2), nullable=True),
            sa.Column("cost_per_click", sa.Numeric(10, 2), nullable=True),
            sa.Column("quality_of_ads", sa.Numeric(5, 2), nullable=True),
            sa.Column("lead_quality", sa.Numeric(5, 2), nullable=True),
            sa.Column("keyword_refinement", sa.Numeric(5, 2), nullable=True),
            sa.Column("closing_ratio", sa.Numeric(6, 2), nullable=True),
            sa.Column("quantity_leads", sa.Integer(), nullable=True),
            sa.Column("conversions", sa.Integer(), nullable=True),
            sa.Column("closing", sa.Integer(), nullable=True),
            sa.Column("tracking", sa.Integer(), nullable=True),
            *_timestamps(),
        )
        op.create_index("idx_ads_kpis_client_date", "ads_kpis", ["client_id", "date"])
        op.create_index("idx_ads_kpis_platform", "ads_kpis", ["platform"])
        op.create_index("idx_ads_kpis_team_member_id", "ads_kpis", ["team_member_id"])

    if not insp.has_table("email_marketing_kpis"):
        op.create_table(
            "email_marketing_kpis",
            *_kpi_refs(),
            sa.Column("template_quality", sa.Numeric(5, 2), nullable=True),
            sa.Column("emails_sent", sa.Integer(), nullable=True),
            sa.Column("opening_ratio", sa.Numeric(6, 2), nullable=True),
            *_timestamps(),
        )
        op.create_index("idx_email_marketing_kpis_client_date", "email_marketing_kpis", ["client_id", "date"])
        op.create_index("idx_email_marketing_kpis_team_member_id", "email_marketing_kpis", ["team_member_id"])

    if not insp.has_table("client_responses"):
        op.create_table(
            "client_responses",
            *_kpi_refs(),
            sa.Column("review_rating", sa.Integer(), nullable=True),
            sa.Column("review_comment", sa.Text(), nullable=True),
            sa.Column("miscellaneous_work", sa.Text(), nullable=True),
            *_timestamps(),
        )
        op.create_index("idx_client_responses_client_date", "client_responses", ["client_id", "date"])
        op.create_index("idx_client_responses_team_member_id", "client_responses", ["team_member_id"])

    if not insp.has_table("team_kpis"):
        op.create_table(
            "team_kpis",
            *_kpi_refs(member_required=True, with_client=False),
            sa.Column("tasks_assigned", sa.Integer(), nullable=True),
            sa.Column("tasks_completed", sa.Integer(), nullable=True),
            sa.Column("quality_score", sa.Numeric(5, 2), nullable=True),
            sa.Column("responsibility_score", sa.Numeric(5, 2), nullable=True),
            sa.Column("punctuality_score", sa.Numeric(5, 2), nullable=True),
            *_timestamps(),
        )
        op.create_index("idx_team_kpis_member_date", "team_kpis", ["team_member_id", "date"])


def downgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)
    for table in (
        "team_kpis",
        "client_responses",
        "email_marketing_kpis",
        "ads_kpis",
        "website_seo_kpis",
        "social_media_kpis",
        "team_members",
        "clients",
        "users",
    ):
        if insp.has_table(table):
            op.drop_table(table)
