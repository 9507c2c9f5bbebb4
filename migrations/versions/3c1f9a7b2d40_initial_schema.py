"""initial schema: nonces, users, fight logs

Revision ID: 3c1f9a7b2d40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a7b2d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the nonce, user and fight log tables."""
    op.create_table(
        "nonce",
        sa.Column("value", sa.String(length=128), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("value"),
    )
    op.create_index("ix_nonce_expires_at_used", "nonce", ["expires_at", "used"])

    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("address", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("address"),
    )

    op.create_table(
        "fight_log",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("player_a_id", sa.Integer(), nullable=False),
        sa.Column("player_b_id", sa.Integer(), nullable=False),
        sa.Column("log", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["player_a_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_b_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_fight_log_created_at", "fight_log", ["created_at"])


def downgrade() -> None:
    """Drop all tables created by this revision."""
    op.drop_index("ix_fight_log_created_at", table_name="fight_log")
    op.drop_table("fight_log")
    op.drop_table("user_account")
    op.drop_index("ix_nonce_expires_at_used", table_name="nonce")
    op.drop_table("nonce")
