"""Baseline board schema

Revision ID: 5c1d9e07a2b3
Revises:
Create Date: 2026-10-19 09:12:44.103517

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c1d9e07a2b3"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _item_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.String(length=64), nullable=False),
        sa.Column("x", sa.Float(), nullable=False),
        sa.Column("y", sa.Float(), nullable=False),
        sa.Column("scale", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "audio_items",
        *_item_columns(),
        sa.Column("audio_url", sa.String(length=512), nullable=False),
        sa.Column("duration_ms", sa.Integer(), nullable=True),
        sa.Column("visual_format", sa.String(length=16), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audio_items_id", "audio_items", ["id"])
    op.create_index("ix_audio_items_owner_id", "audio_items", ["owner_id"])
    op.create_index("ix_audio_items_created_at", "audio_items", ["created_at"])
    op.create_index("idx_audio_items_owner_created", "audio_items", ["owner_id", "created_at"])

    op.create_table(
        "text_items",
        *_item_columns(),
        sa.Column("text", sa.String(length=1000), nullable=False),
        sa.Column("font", sa.String(length=32), nullable=False),
        sa.Column("opacity", sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_text_items_id", "text_items", ["id"])
    op.create_index("ix_text_items_owner_id", "text_items", ["owner_id"])
    op.create_index("ix_text_items_created_at", "text_items", ["created_at"])
    op.create_index("idx_text_items_owner_created", "text_items", ["owner_id", "created_at"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("text_items")
    op.drop_table("audio_items")
