"""create memories and memory_assets tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "memories",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("memory_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("tags", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("edited_by", sa.String(), nullable=True),
    )
    op.create_index("ix_memories_memory_date_id", "memories", ["memory_date", "id"])

    op.create_table(
        "memory_assets",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("memory_id", sa.String(length=36), sa.ForeignKey("memories.id", ondelete="CASCADE"), nullable=False),
        sa.Column("asset_key", sa.String(), nullable=False),
        sa.Column("thumbnail_key", sa.String(), nullable=True),
        sa.Column("asset_type", sa.String(length=16), nullable=False),
        sa.Column("sort_order", sa.Integer(), server_default=sa.text("0"), nullable=False),
    )
    op.create_index("ix_memory_assets_memory_id_sort_order", "memory_assets", ["memory_id", "sort_order"])


def downgrade() -> None:
    op.drop_index("ix_memory_assets_memory_id_sort_order", table_name="memory_assets")
    op.drop_table("memory_assets")
    op.drop_index("ix_memories_memory_date_id", table_name="memories")
    op.drop_table("memories")
