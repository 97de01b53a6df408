from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.kpidash.models import Base


class SocialMediaKpi(Base):
    __tablename__ = "social_media_kpis"
    __table_args__ = (
        Index("idx_social_media_kpis_client_date", "client_id", "date"),
        Index("idx_social_media_kpis_team_member_id", "team_member_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("clients.id"), nullable=False)
    team_member_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("team_members.id"), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    platform: Mapped[str] = mapped_column(String(50), nullable=False)  # Reddit, TikTok, Instagram, Facebook, YouTube
    quality_score: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)  # 0-10
    quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)  # posts published

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=dt.datetime.utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=dt.datetime.utcnow)

    client = relationship("Client", lazy="joined")
    team_member = relationship("TeamMember", lazy="joined")
