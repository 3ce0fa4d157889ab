"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "venues",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500)),
        sa.Column("city", sa.String(255)),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("category", sa.String(50), nullable=False, server_default="bar"),
        sa.Column("external_place_id", sa.String(255), unique=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
    )

    op.create_table(
        "vibe_users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("last_seen_at", sa.DateTime, server_default=sa.func.now(), index=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
    )

    op.create_table(
        "check_ins",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("venue_id", sa.String(36), sa.ForeignKey("venues.id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("vibe_users.id"), nullable=True),
        sa.Column("vibe_score", sa.String(10), nullable=False),
        sa.Column("intent", sa.String(20), nullable=False),
        sa.Column("relationship_status", sa.String(30)),
        sa.Column("ons_intent", sa.String(30)),
        sa.Column("gender", sa.String(30)),
        sa.Column("age_band", sa.String(10)),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False, index=True),
    )
    op.create_index("ix_check_ins_venue_created", "check_ins", ["venue_id", "created_at"])

    op.create_table(
        "notification_sessions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("vibe_users.id"), nullable=False),
        sa.Column("filters", sa.JSON),
        sa.Column("started_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
        sa.Column("ends_at", sa.DateTime, nullable=False),
        sa.Column("is_active", sa.Boolean, server_default=sa.text("true")),
        sa.Column("last_notified_at", sa.DateTime),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_notification_sessions_user_active", "notification_sessions", ["user_id", "is_active"])


def downgrade() -> None:
    op.drop_index("ix_notification_sessions_user_active", table_name="notification_sessions")
    op.drop_table("notification_sessions")
    op.drop_index("ix_check_ins_venue_created", table_name="check_ins")
    op.drop_table("check_ins")
    op.drop_table("vibe_users")
    op.drop_table("venues")
