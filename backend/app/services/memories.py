from __future__ import annotations

import logging
from collections import defaultdict
from typing import Sequence
from uuid import uuid4

from sqlalchemy import delete, desc, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import MemoryNotFoundError, TimelineError
from app.models.memory import Memory, MemoryAsset
from app.schemas.memory import (
    AssetOut,
    AssetPayload,
    Cursor,
    MediaItem,
    MemoryCreate,
    MemoryOut,
    MemoryPage,
    MemoryUpdate,
)
from app.services.batch import BatchStatement, execute_batch
from app.services.filters import MemoryFilters, build_filter_clause
from app.services.patch import reconcile_patch
from app.services.tags import normalize_tags
from app.services.timeutils import to_utc, utcnow
from app.services.validation import clean_text, validate_asset_count, validate_content

logger = logging.getLogger(__name__)


def _hydrate(memory: Memory, assets: Sequence[MemoryAsset]) -> MemoryOut:
    out = MemoryOut.model_validate(memory)
    out.assets = [AssetOut.model_validate(asset) for asset in assets]
    return out


def _asset_inserts(memory_id: str, assets: Sequence[AssetPayload]) -> list[BatchStatement]:
    statements = []
    for index, asset in enumerate(assets):
        statements.append(
            BatchStatement(
                insert(MemoryAsset).values(
                    id=str(uuid4()),
                    memory_id=memory_id,
                    asset_key=asset.asset_key,
                    thumbnail_key=asset.thumbnail_key,
                    asset_type=asset.asset_type,
                    sort_order=asset.sort_order if asset.sort_order is not None else index,
                )
            )
        )
    return statements


async def _fetch_assets(db: AsyncSession, memory_ids: Sequence[str]) -> dict[str, list[MemoryAsset]]:
    grouped: dict[str, list[MemoryAsset]] = defaultdict(list)
    if not memory_ids:
        return grouped
    result = await db.execute(
        select(MemoryAsset)
        .where(MemoryAsset.memory_id.in_(memory_ids))
        .order_by(MemoryAsset.memory_id, MemoryAsset.sort_order.asc())
        .execution_options(populate_existing=True)
    )
    for asset in result.scalars().all():
        grouped[asset.memory_id].append(asset)
    return grouped


async def get_memory(db: AsyncSession, memory_id: str) -> MemoryOut:
    result = await db.execute(
        select(Memory).where(Memory.id == memory_id).execution_options(populate_existing=True)
    )
    memory = result.scalar_one_or_none()
    if memory is None:
        raise MemoryNotFoundError(memory_id)
    assets = await _fetch_assets(db, [memory.id])
    return _hydrate(memory, assets[memory.id])


async def list_memories(db: AsyncSession, filters: MemoryFilters, limit: int) -> MemoryPage:
    clause = build_filter_clause(filters)
    result = await db.execute(
        select(Memory)
        .where(clause.predicate)
        .order_by(desc(Memory.memory_date), desc(Memory.id))
        .limit(limit + 1)
    )
    memories = list(result.scalars().all())

    next_cursor = None
    if len(memories) > limit:
        memories = memories[:limit]
        last = memories[-1]
        next_cursor = Cursor(date=to_utc(last.memory_date), id=last.id)

    assets = await _fetch_assets(db, [memory.id for memory in memories])
    return MemoryPage(
        memories=[_hydrate(memory, assets[memory.id]) for memory in memories],
        nextCursor=next_cursor,
    )


async def create_memory(db: AsyncSession, user_id: str, payload: MemoryCreate) -> MemoryOut:
    validate_content(payload.type, payload.content)
    validate_asset_count(payload.type, len(payload.assets))

    memory_id = str(uuid4())
    now = utcnow()
    statements = [
        BatchStatement(
            insert(Memory).values(
                id=memory_id,
                user_id=user_id,
                type=payload.type,
                content=clean_text(payload.content),
                caption=clean_text(payload.caption),
                location=clean_text(payload.location),
                memory_date=to_utc(payload.memory_date),
                tags=normalize_tags(payload.tags),
                created_at=now,
                updated_at=now,
            )
        ),
        *_asset_inserts(memory_id, payload.assets),
    ]
    await execute_batch(db, statements, action="add memory")
    logger.info("Created memory id=%s type=%s assets=%s", memory_id, payload.type, len(payload.assets))
    return await get_memory(db, memory_id)


async def update_memory(db: AsyncSession, memory_id: str, user_id: str, payload: MemoryUpdate) -> MemoryOut:
    try:
        # Row lock keeps concurrent asset-set replacements on one memory from interleaving.
        result = await db.execute(select(Memory.type).where(Memory.id == memory_id).with_for_update())
        current_type = result.scalar_one_or_none()
        if current_type is None:
            raise MemoryNotFoundError(memory_id)
        plan = reconcile_patch(current_type, payload, editor=user_id, now=utcnow())
    except TimelineError:
        await db.rollback()
        raise

    if plan.is_empty:
        await db.rollback()
        logger.info("No update statements for memory id=%s, returning current state", memory_id)
        return await get_memory(db, memory_id)

    statements = [
        BatchStatement(
            update(Memory)
            .where(Memory.id == memory_id)
            .values(**plan.memory_values)
            .execution_options(synchronize_session=False),
            expected_rows=1,
        )
    ]
    if plan.replaces_assets:
        statements.append(
            BatchStatement(
                delete(MemoryAsset)
                .where(MemoryAsset.memory_id == memory_id)
                .execution_options(synchronize_session=False)
            )
        )
        statements.extend(_asset_inserts(memory_id, plan.assets))

    await execute_batch(db, statements, action="update memory")
    logger.info(
        "Updated memory id=%s fields=%s replaced_assets=%s",
        memory_id,
        sorted(plan.memory_values),
        plan.replaces_assets,
    )
    return await get_memory(db, memory_id)


async def list_all_media(db: AsyncSession) -> list[MediaItem]:
    result = await db.execute(
        select(
            MemoryAsset.asset_key,
            MemoryAsset.thumbnail_key,
            MemoryAsset.asset_type,
            Memory.memory_date,
            Memory.caption.label("memory_caption"),
            MemoryAsset.memory_id,
            MemoryAsset.sort_order,
        )
        .distinct()
        .join(Memory, MemoryAsset.memory_id == Memory.id)
        .where(MemoryAsset.asset_type.in_(("image", "video")))
        .order_by(desc(Memory.memory_date), MemoryAsset.memory_id, MemoryAsset.sort_order)
    )
    return [MediaItem.model_validate(dict(row)) for row in result.mappings().all()]
