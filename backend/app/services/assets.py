from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import NoReturn
from uuid import uuid4

from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.errors import AssetNotFoundError, PayloadTooLargeError, StorageError, StorageUnavailableError
from app.services.storage import BlobStore, StoredObject
from app.services.thumbnail import (
    THUMBNAIL_CONTENT_TYPE,
    THUMBNAIL_EXTENSION,
    THUMBNAIL_SOURCE_TYPES,
    generate_thumbnail,
)

logger = logging.getLogger(__name__)

THUMBNAIL_KEY_PREFIX = "thumb-"
_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9.]+")


@dataclass
class UploadResult:
    key: str
    thumbnail_key: str | None = None


def split_filename(original_name: str) -> tuple[str, str]:
    """Return ``(sanitized_stem, extension)`` for building storage keys."""
    extension = original_name[original_name.rindex("."):] if "." in original_name else ""
    stem = _UNSAFE_NAME_CHARS.sub("-", original_name)
    stem = re.sub(r"\.[^.]+$", "", stem)
    return stem, extension


def build_asset_key(original_name: str) -> str:
    stem, extension = split_filename(original_name)
    return f"{uuid4()}-{stem}{extension}"


def build_thumbnail_key(original_name: str) -> str:
    stem, _ = split_filename(original_name)
    return f"{THUMBNAIL_KEY_PREFIX}{uuid4()}-{stem}{THUMBNAIL_EXTENSION}"


def _raise_storage_error(exc: Exception, action: str) -> NoReturn:
    if isinstance(exc, ValueError):
        raise StorageUnavailableError(f"Asset storage is not configured: {exc}") from exc
    if isinstance(exc, ClientError):
        error_code = exc.response.get("Error", {}).get("Code", "UnknownError")
        raise StorageError(f"Failed to {action}.", details={"error": error_code}) from exc
    raise StorageError(f"Failed to {action}.", details={"error": exc.__class__.__name__}) from exc


async def _put(store: BlobStore, key: str, data: bytes, content_type: str) -> None:
    try:
        await asyncio.to_thread(store.put, key, data, content_type, settings.ASSET_CACHE_CONTROL)
    except (ValueError, ClientError, BotoCoreError) as exc:
        _raise_storage_error(exc, "store asset")


async def _create_thumbnail(store: BlobStore, file_bytes: bytes, original_name: str, key: str) -> str | None:
    try:
        thumbnail_bytes = await asyncio.to_thread(
            generate_thumbnail, file_bytes, settings.THUMBNAIL_WIDTH, settings.THUMBNAIL_QUALITY
        )
        thumbnail_key = build_thumbnail_key(original_name)
        await asyncio.to_thread(
            store.put, thumbnail_key, thumbnail_bytes, THUMBNAIL_CONTENT_TYPE, settings.ASSET_CACHE_CONTROL
        )
    except Exception:
        logger.warning("Thumbnail generation failed for %s, continuing without one", key, exc_info=True)
        return None
    logger.info("Uploaded thumbnail %s for %s", thumbnail_key, key)
    return thumbnail_key


async def upload_asset(store: BlobStore, file_bytes: bytes, original_name: str, mime_type: str | None) -> UploadResult:
    max_bytes = settings.max_upload_size_bytes
    if len(file_bytes) > max_bytes:
        raise PayloadTooLargeError(max_bytes=max_bytes, received=len(file_bytes))

    content_type = mime_type or "application/octet-stream"
    key = build_asset_key(original_name)
    await _put(store, key, file_bytes, content_type)
    logger.info("Uploaded original %s (%s, %s bytes)", key, content_type, len(file_bytes))

    if content_type not in THUMBNAIL_SOURCE_TYPES:
        logger.debug("Skipping thumbnail for %s (type %s)", key, content_type)
        return UploadResult(key=key)

    thumbnail_key = await _create_thumbnail(store, file_bytes, original_name, key)
    return UploadResult(key=key, thumbnail_key=thumbnail_key)


async def fetch_asset(store: BlobStore, key: str) -> StoredObject:
    try:
        stored = await asyncio.to_thread(store.get, key)
    except (ValueError, ClientError, BotoCoreError) as exc:
        _raise_storage_error(exc, "fetch asset")
    if stored is None:
        raise AssetNotFoundError(key)
    return stored
