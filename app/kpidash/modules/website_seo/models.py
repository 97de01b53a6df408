from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import JSON, Boolean, Date, DateTime, ForeignKey, Index, Integer, Numeric, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.kpidash.models import Base


class WebsiteSeoKpi(Base):
    __tablename__ = "website_seo_kpis"
    __table_args__ = (
        Index("idx_website_seo_kpis_client_date", "client_id", "date"),
        Index("idx_website_seo_kpis_team_member_id", "team_member_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("clients.id"), nullable=False)
    team_member_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("team_members.id"), nullable=True)
    # String ids; JSONB on Postgres, plain JSON elsewhere (tests run on SQLite)
    team_member_ids: Mapped[list] = mapped_column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    changes_asked: Mapped[int | None] = mapped_column(Integer, nullable=True)
    blogs_posted: Mapped[int | None] = mapped_column(Integer, nullable=True)
    updates: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ranking_issues: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ranking_issues_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    reports_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    backlinks: Mapped[int | None] = mapped_column(Integer, nullable=True)
    domain_authority: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    page_authority: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    keyword_pass: Mapped[int | None] = mapped_column(Integer, nullable=True)
    site_health: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)  # percent
    issues: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=dt.datetime.utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=dt.datetime.utcnow)

    client = relationship("Client", lazy="joined")
    team_member = relationship("TeamMember", lazy="joined")
