from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.services.timeutils import to_utc

MemoryType = Literal["quote", "image", "video", "hybrid", "gallery"]
AssetType = Literal["image", "video"]


class AssetPayload(BaseModel):
    asset_key: str = Field(min_length=1)
    thumbnail_key: str | None = None
    asset_type: AssetType
    sort_order: int | None = None


class MemoryCreate(BaseModel):
    type: MemoryType
    content: str | None = None
    assets: list[AssetPayload] = Field(default_factory=list)
    caption: str | None = None
    location: str | None = None
    memory_date: datetime
    tags: str | None = None


class MemoryUpdate(BaseModel):
    """Partial update. Only keys present in ``model_fields_set`` are applied."""

    type: MemoryType | None = None
    content: str | None = None
    assets: list[AssetPayload] | None = None
    caption: str | None = None
    location: str | None = None
    memory_date: datetime | None = None
    tags: str | None = None


class AssetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    memory_id: str
    asset_key: str
    thumbnail_key: str | None = None
    asset_type: AssetType
    sort_order: int


class MemoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    type: MemoryType
    content: str | None = None
    caption: str | None = None
    location: str | None = None
    memory_date: datetime
    created_at: datetime
    updated_at: datetime | None = None
    edited_by: str | None = None
    tags: str | None = None
    assets: list[AssetOut] = Field(default_factory=list)

    @field_validator("memory_date", "created_at", "updated_at")
    @classmethod
    def _normalize_timestamp(cls, value: datetime | None) -> datetime | None:
        return to_utc(value) if value is not None else None


class Cursor(BaseModel):
    date: datetime
    id: str

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: datetime) -> datetime:
        return to_utc(value)


class MemoryResponse(BaseModel):
    memory: MemoryOut


class MemoryPage(BaseModel):
    memories: list[MemoryOut]
    nextCursor: Cursor | None = None


class MediaItem(BaseModel):
    asset_key: str
    thumbnail_key: str | None = None
    asset_type: AssetType
    memory_date: datetime
    memory_caption: str | None = None

    @field_validator("memory_date")
    @classmethod
    def _normalize_date(cls, value: datetime) -> datetime:
        return to_utc(value)


class MediaResponse(BaseModel):
    media: list[MediaItem]


class UploadResponse(BaseModel):
    key: str
    thumbnailKey: str | None = None
