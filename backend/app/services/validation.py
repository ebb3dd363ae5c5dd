from __future__ import annotations

from app.core.errors import PayloadValidationError

CONTENT_TYPES = frozenset({"quote", "hybrid"})
ASSET_BEARING_TYPES = frozenset({"image", "video", "gallery"})
SINGLE_ASSET_TYPES = frozenset({"image", "video"})


def clean_text(value: str | None) -> str | None:
    if value is None or value.strip() == "":
        return None
    return value


def validate_content(memory_type: str, content: str | None) -> None:
    has_content = clean_text(content) is not None
    if memory_type in CONTENT_TYPES and not has_content:
        raise PayloadValidationError(f"Content required for {memory_type}.", details={"field": "content"})
    if memory_type not in CONTENT_TYPES and has_content:
        raise PayloadValidationError(f"Content not allowed for {memory_type}.", details={"field": "content"})


def validate_asset_count(memory_type: str, count: int) -> None:
    if memory_type in CONTENT_TYPES and count > 0:
        raise PayloadValidationError(
            f"Assets not allowed for {memory_type}.", details={"field": "assets", "count": count}
        )
    if memory_type in SINGLE_ASSET_TYPES and count != 1:
        raise PayloadValidationError(
            f"Exactly one asset required for type {memory_type}.", details={"field": "assets", "count": count}
        )
    if memory_type == "gallery" and count == 0:
        raise PayloadValidationError(
            "At least one asset required for gallery.", details={"field": "assets", "count": count}
        )


def is_supported_type_change(current_type: str, requested_type: str) -> bool:
    if current_type == requested_type:
        return True
    return current_type not in ASSET_BEARING_TYPES and requested_type not in ASSET_BEARING_TYPES
