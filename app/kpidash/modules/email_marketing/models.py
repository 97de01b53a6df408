from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.kpidash.models import Base


class EmailMarketingKpi(Base):
    __tablename__ = "email_marketing_kpis"
    __table_args__ = (
        Index("idx_email_marketing_kpis_client_date", "client_id", "date"),
        Index("idx_email_marketing_kpis_team_member_id", "team_member_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("clients.id"), nullable=False)
    team_member_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("team_members.id"), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    template_quality: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    emails_sent: Mapped[int | None] = mapped_column(Integer, nullable=True)
    opening_ratio: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)  # percent

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=dt.datetime.utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=dt.datetime.utcnow)

    client = relationship("Client", lazy="joined")
    team_member = relationship("TeamMember", lazy="joined")
