from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.memory import MediaResponse
from app.services.identity import require_current_user
from app.services.memories import list_all_media

router = APIRouter(tags=["media"])


@router.get("/all-media", response_model=MediaResponse)
async def all_media(
    current_user: str = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
):
    # TODO: paginate with the same (memory_date, id) cursor as /memories once the gallery modal pages.
    return {"media": await list_all_media(db)}
