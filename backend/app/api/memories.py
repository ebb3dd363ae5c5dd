from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.schemas.memory import MemoryCreate, MemoryPage, MemoryResponse, MemoryUpdate
from app.services.filters import MemoryFilters
from app.services.identity import require_current_user
from app.services.memories import create_memory, get_memory, list_memories, update_memory

router = APIRouter(prefix="/memories", tags=["memories"])


@router.get("", response_model=MemoryPage)
async def list_memories_endpoint(
    q: str | None = Query(default=None),
    location: str | None = Query(default=None),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    tags: str | None = Query(default=None),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    cursor_date: str | None = Query(default=None, alias="cursorDate"),
    cursor_id: str | None = Query(default=None, alias="cursorId"),
    current_user: str = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
):
    filters = MemoryFilters.from_query(
        q=q,
        location=location,
        start_date=start_date,
        end_date=end_date,
        tags=tags,
        cursor_date=cursor_date,
        cursor_id=cursor_id,
    )
    return await list_memories(db, filters, limit)


@router.post("", response_model=MemoryResponse, status_code=status.HTTP_201_CREATED)
async def create_memory_endpoint(
    payload: MemoryCreate,
    current_user: str = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
):
    memory = await create_memory(db, current_user, payload)
    return {"memory": memory}


@router.get("/{memory_id}", response_model=MemoryResponse)
async def get_memory_endpoint(
    memory_id: str = Path(...),
    current_user: str = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
):
    return {"memory": await get_memory(db, memory_id)}


@router.patch("/{memory_id}", response_model=MemoryResponse)
async def update_memory_endpoint(
    payload: MemoryUpdate,
    memory_id: str = Path(...),
    current_user: str = Depends(require_current_user),
    db: AsyncSession = Depends(get_db),
):
    memory = await update_memory(db, memory_id, current_user, payload)
    return {"memory": memory}
