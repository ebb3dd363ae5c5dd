from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from app.core.errors import MemoryWriteError

logger = logging.getLogger(__name__)


@dataclass
class BatchStatement:
    statement: Executable
    expected_rows: int | None = None


class BatchRowCountMismatch(Exception):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected {expected} affected row(s), got {actual}")


async def execute_batch(db: AsyncSession, statements: Sequence[BatchStatement], *, action: str) -> None:
    logger.debug("Executing batch action=%s statements=%s", action, len(statements))
    index = 0
    try:
        for index, item in enumerate(statements):
            result = await db.execute(item.statement)
            if item.expected_rows is not None and result.rowcount != item.expected_rows:
                raise BatchRowCountMismatch(item.expected_rows, result.rowcount)
        await db.commit()
    except (SQLAlchemyError, BatchRowCountMismatch) as exc:
        await db.rollback()
        error = str(getattr(exc, "orig", None) or exc)
        logger.error("Batch failed action=%s statement=%s error=%s", action, index, error)
        raise MemoryWriteError(
            f"Failed to {action} (batch operation failed).",
            details={"statement": index, "error": error},
        ) from exc
