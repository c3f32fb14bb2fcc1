"""
Chunked commits bounded by the store's per-batch operation ceiling.

Each chunk is applied and committed before the next one starts. A chunk is
all-or-nothing; the sequence of chunks is not.
"""

import logging
from typing import Awaitable, Callable, Iterator, List, Optional, Sequence, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.core.config import settings
from admission_portal.core.exceptions import PartialBatchFailure, ServiceError
from admission_portal.db.errors import classify_store_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


def resolve_batch_limit(batch_limit: Optional[int] = None) -> int:
    limit = batch_limit if batch_limit is not None else settings.store_batch_limit
    if limit <= 0:
        raise ValueError("batch_limit must be positive")
    return limit


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most `size` items."""
    for start in range(0, len(items), size):
        yield items[start:start + size]


async def commit_in_batches(
    db: AsyncSession,
    items: Sequence[T],
    apply_chunk: Callable[[AsyncSession, Sequence[T]], Awaitable[None]],
    *,
    batch_limit: Optional[int] = None,
    action: str = "commit batch",
) -> List[int]:
    """
    Apply `apply_chunk` to each chunk and commit it. Returns the size of every committed chunk.

    On failure the current chunk is rolled back, remaining chunks are skipped and
    PartialBatchFailure is raised with the number of items already committed.
    """
    limit = resolve_batch_limit(batch_limit)
    committed: List[int] = []
    for chunk in chunked(items, limit):
        try:
            await apply_chunk(db, chunk)
            await db.commit()
        except (SQLAlchemyError, ServiceError) as e:
            await db.rollback()
            done = sum(committed)
            logger.error(
                "Batch %d failed during %s; %d item(s) committed before the failure",
                len(committed) + 1,
                action,
                done,
                exc_info=True,
            )
            reason = classify_store_error(e, action).message if isinstance(e, SQLAlchemyError) else e.message
            raise PartialBatchFailure(
                f"Failed to {action} after {done} of {len(items)} item(s). Reason: {reason}",
                committed_count=done,
            ) from e
        committed.append(len(chunk))
        logger.info("Committed batch of %d item(s) (%s)", len(chunk), action)
    return committed
