from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.kpidash.models import Base


class ClientResponse(Base):
    __tablename__ = "client_responses"
    __table_args__ = (
        Index("idx_client_responses_client_date", "client_id", "date"),
        Index("idx_client_responses_team_member_id", "team_member_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("clients.id"), nullable=False)
    team_member_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("team_members.id"), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    review_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 0 = no review, 1-5 stars
    review_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    miscellaneous_work: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=dt.datetime.utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=dt.datetime.utcnow)

    client = relationship("Client", lazy="joined")
    team_member = relationship("TeamMember", lazy="joined")
