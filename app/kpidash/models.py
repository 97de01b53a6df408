from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'editor', 'viewer')", name="ck_users_role"),
        Index("idx_users_username", "username"),
        Index("idx_users_email", "email"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="viewer")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    def to_public_dict(self) -> dict:
        return {
            "id": str(self.id),
            "full_name": self.full_name,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class ActivityLog(Base):
    """
    Append-only feed of who changed what, shown in the dashboard's activity panel.
    Rows outlive the user that produced them (user_id is nulled on user delete).
    """

    __tablename__ = "activity_log"
    __table_args__ = (
        Index("idx_activity_log_created_at", "created_at"),
        Index("idx_activity_log_user_id", "user_id"),
        Index("idx_activity_log_action_type", "action_type"),
        Index("idx_activity_log_is_read", "is_read"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    action_type: Mapped[str] = mapped_column(String(50), nullable=False)  # e.g. "client_added"
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)  # e.g. "client", "social_media"
    entity_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    entity_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tab_name: Mapped[str | None] = mapped_column(String(50), nullable=True)  # dashboard tab, e.g. "AdsTab"
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    user = relationship("User", lazy="joined")


# Ensure module models are imported so Base.metadata includes their tables.
# (Kept at bottom to avoid circular imports.)
from app.kpidash.modules.clients.models import Client  # noqa: E402,F401
from app.kpidash.modules.team.models import TeamMember  # noqa: E402,F401
from app.kpidash.modules.social_media.models import SocialMediaKpi  # noqa: E402,F401
from app.kpidash.modules.website_seo.models import WebsiteSeoKpi  # noqa: E402,F401
from app.kpidash.modules.ads.models import AdsKpi  # noqa: E402,F401
from app.kpidash.modules.email_marketing.models import EmailMarketingKpi  # noqa: E402,F401
from app.kpidash.modules.client_responses.models import ClientResponse  # noqa: E402,F401
from app.kpidash.modules.team_kpis.models import TeamKpi  # noqa: E402,F401
