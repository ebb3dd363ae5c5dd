from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.core.errors import PayloadValidationError, UnsupportedTypeChangeError
from app.schemas.memory import AssetPayload, MemoryUpdate
from app.services.tags import normalize_tags
from app.services.timeutils import to_utc
from app.services.validation import (
    clean_text,
    is_supported_type_change,
    validate_asset_count,
    validate_content,
)

NULLABLE_TEXT_FIELDS = ("caption", "location")


@dataclass
class PatchPlan:
    effective_type: str
    memory_values: dict[str, Any] = field(default_factory=dict)
    assets: list[AssetPayload] | None = None

    @property
    def replaces_assets(self) -> bool:
        return self.assets is not None

    @property
    def is_empty(self) -> bool:
        return not self.memory_values and self.assets is None


def reconcile_patch(current_type: str, payload: MemoryUpdate, *, editor: str, now: datetime) -> PatchPlan:
    present = payload.model_fields_set
    values: dict[str, Any] = {}

    effective_type = current_type
    if "type" in present:
        if payload.type is None:
            raise PayloadValidationError("type cannot be cleared.", details={"field": "type"})
        if not is_supported_type_change(current_type, payload.type):
            raise UnsupportedTypeChangeError(current_type, payload.type)
        effective_type = payload.type
        values["type"] = payload.type

    if "content" in present:
        validate_content(effective_type, payload.content)
        values["content"] = clean_text(payload.content)

    for name in NULLABLE_TEXT_FIELDS:
        if name in present:
            values[name] = clean_text(getattr(payload, name))

    if "memory_date" in present:
        if payload.memory_date is None:
            raise PayloadValidationError("memory_date cannot be cleared.", details={"field": "memory_date"})
        values["memory_date"] = to_utc(payload.memory_date)

    if "tags" in present:
        values["tags"] = normalize_tags(payload.tags)

    assets = None
    if "assets" in present:
        assets = list(payload.assets or [])
        validate_asset_count(effective_type, len(assets))

    if values or assets is not None:
        values["updated_at"] = now
        values["edited_by"] = editor

    return PatchPlan(effective_type=effective_type, memory_values=values, assets=assets)
