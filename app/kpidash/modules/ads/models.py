from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.kpidash.models import Base


class AdsKpi(Base):
    __tablename__ = "ads_kpis"
    __table_args__ = (
        Index("idx_ads_kpis_client_date", "client_id", "date"),
        Index("idx_ads_kpis_platform", "platform"),
        Index("idx_ads_kpis_team_member_id", "team_member_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("clients.id"), nullable=False)
    team_member_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("team_members.id"), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    platform: Mapped[str] = mapped_column(String(50), nullable=False)

    # Money
    cost_per_lead: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    cost_per_click: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    # 0-10 scores
    quality_of_ads: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    lead_quality: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    keyword_refinement: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)

    closing_ratio: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)  # percent
    quantity_leads: Mapped[int | None] = mapped_column(Integer, nullable=True)
    conversions: Mapped[int | None] = mapped_column(Integer, nullable=True)
    closing: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tracking: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=dt.datetime.utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=dt.datetime.utcnow)

    client = relationship("Client", lazy="joined")
    team_member = relationship("TeamMember", lazy="joined")
