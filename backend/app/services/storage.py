from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Protocol

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError

from app.core.config import settings

MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


@dataclass
class StoredObject:
    body: Iterator[bytes]
    content_type: str
    cache_control: str | None = None
    etag: str | None = None
    content_length: int | None = None
    close: Callable[[], None] | None = None


class BlobStore(Protocol):
    def put(self, key: str, data: bytes, content_type: str, cache_control: str | None = None) -> None: ...

    def get(self, key: str) -> StoredObject | None: ...


def _get_endpoint_url() -> str:
    if settings.R2_ENDPOINT_URL:
        return settings.R2_ENDPOINT_URL
    if not settings.R2_ACCOUNT_ID:
        raise ValueError("R2_ACCOUNT_ID is required when R2_ENDPOINT_URL is not set.")
    return f"https://{settings.R2_ACCOUNT_ID}.r2.cloudflarestorage.com"


def _get_bucket_name() -> str:
    if not settings.R2_BUCKET_NAME:
        raise ValueError("R2_BUCKET_NAME is required.")
    return settings.R2_BUCKET_NAME


def _get_client():
    if not settings.R2_ACCESS_KEY_ID or not settings.R2_SECRET_ACCESS_KEY:
        raise ValueError("R2_ACCESS_KEY_ID and R2_SECRET_ACCESS_KEY are required.")

    return boto3.client(
        "s3",
        endpoint_url=_get_endpoint_url(),
        aws_access_key_id=settings.R2_ACCESS_KEY_ID,
        aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
        region_name=settings.R2_REGION,
        config=Config(signature_version="s3v4"),
    )


class R2BlobStore:
    """S3-compatible bucket (Cloudflare R2) accessed through boto3."""

    def put(self, key: str, data: bytes, content_type: str, cache_control: str | None = None) -> None:
        params = {
            "Bucket": _get_bucket_name(),
            "Key": key,
            "Body": data,
            "ContentType": content_type,
        }
        if cache_control:
            params["CacheControl"] = cache_control
        _get_client().put_object(**params)

    def get(self, key: str) -> StoredObject | None:
        try:
            response = _get_client().get_object(Bucket=_get_bucket_name(), Key=key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in MISSING_KEY_CODES:
                return None
            raise
        return StoredObject(
            body=response["Body"].iter_chunks(),
            content_type=response.get("ContentType") or "application/octet-stream",
            cache_control=response.get("CacheControl"),
            etag=response.get("ETag"),
            content_length=response.get("ContentLength"),
            close=response["Body"].close,
        )


def get_blob_store() -> BlobStore:
    return R2BlobStore()
