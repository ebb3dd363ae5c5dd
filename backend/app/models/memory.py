import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.sql import func

from app.core.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Memory(Base):
    __tablename__ = "memories"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False)
    type = Column(String(16), nullable=False)
    content = Column(Text, nullable=True)
    caption = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    memory_date = Column(DateTime(timezone=True), nullable=False)
    tags = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    edited_by = Column(String, nullable=True)

    __table_args__ = (Index("ix_memories_memory_date_id", "memory_date", "id"),)


class MemoryAsset(Base):
    __tablename__ = "memory_assets"

    id = Column(String(36), primary_key=True, default=_new_id)
    memory_id = Column(String(36), ForeignKey("memories.id", ondelete="CASCADE"), nullable=False)
    asset_key = Column(String, nullable=False)
    thumbnail_key = Column(String, nullable=True)
    asset_type = Column(String(16), nullable=False)
    sort_order = Column(Integer, nullable=False, server_default="0")

    __table_args__ = (Index("ix_memory_assets_memory_id_sort_order", "memory_id", "sort_order"),)
