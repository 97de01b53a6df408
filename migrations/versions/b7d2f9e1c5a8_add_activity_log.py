"""Add activity_log (dashboard activity feed with read state).

Revision ID: b7d2f9e1c5a8
Revises: a1c4e7f0b2d3
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "b7d2f9e1c5a8"
down_revision: Union[str, Sequence[str], None] = "a1c4e7f0b2d3"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)

    if not insp.has_table("activity_log"):
        op.create_table(
            "activity_log",
            sa.Column("id", sa.Uuid(), primary_key=True),
            sa.Column("user_id", sa.Uuid(), nullable=True),
            sa.Column("action_type", sa.String(50), nullable=False),
            sa.Column("entity_type", sa.String(50), nullable=False),
            sa.Column("entity_id", sa.Uuid(), nullable=True),
            sa.Column("entity_name", sa.String(255), nullable=True),
            sa.Column("tab_name", sa.String(50), nullable=True),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.text("false")),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        )
        op.create_index("idx_activity_log_created_at", "activity_log", ["created_at"])
        op.create_index("idx_activity_log_user_id", "activity_log", ["user_id"])
        op.create_index("idx_activity_log_action_type", "activity_log", ["action_type"])
        op.create_index("idx_activity_log_is_read", "activity_log", ["is_read"])
        return

    # Older feeds predate read tracking.
    cols = {c["name"] for c in insp.get_columns("activity_log")}
    if "is_read" not in cols:
        with op.batch_alter_table("activity_log") as batch_op:
            batch_op.add_column(sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.text("false")))
        op.create_index("idx_activity_log_is_read", "activity_log", ["is_read"])


def downgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)
    if insp.has_table("activity_log"):
        op.drop_table("activity_log")
