from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status
from fastapi.responses import StreamingResponse

from app.core.config import settings
from app.core.errors import PayloadTooLargeError, PayloadValidationError
from app.core.rate_limit import limiter
from app.schemas.memory import UploadResponse
from app.services.assets import fetch_asset, upload_asset
from app.services.identity import require_current_user
from app.services.storage import BlobStore, get_blob_store

router = APIRouter(prefix="/assets", tags=["assets"])


@router.post("", response_model=UploadResponse)
@limiter.limit(settings.UPLOAD_RATE_LIMIT)
async def upload_asset_endpoint(
    request: Request,
    file: UploadFile = File(...),
    current_user: str = Depends(require_current_user),
    store: BlobStore = Depends(get_blob_store),
):
    if not file.filename:
        raise PayloadValidationError("File data invalid.", details={"field": "file"})

    max_bytes = settings.max_upload_size_bytes
    if file.size is not None and file.size > max_bytes:
        raise PayloadTooLargeError(max_bytes=max_bytes, received=file.size)

    file_bytes = await file.read()
    result = await upload_asset(store, file_bytes, file.filename, file.content_type)
    return {"key": result.key, "thumbnailKey": result.thumbnail_key}


@router.get("/{key:path}")
async def get_asset_endpoint(
    key: str,
    request: Request,
    current_user: str = Depends(require_current_user),
    store: BlobStore = Depends(get_blob_store),
):
    stored = await fetch_asset(store, key)

    headers = {}
    if stored.cache_control:
        headers["Cache-Control"] = stored.cache_control
    if stored.etag:
        headers["ETag"] = stored.etag
        if request.headers.get("if-none-match") == stored.etag:
            if stored.close is not None:
                stored.close()
            return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)
    if stored.content_length is not None:
        headers["Content-Length"] = str(stored.content_length)

    return StreamingResponse(stored.body, media_type=stored.content_type, headers=headers)
