# storefront/db/repositories/sync_cursors.py
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from storefront.db.models.sync_cursors import SyncCursor


async def get_cursor(db: AsyncSession, stream_name: str) -> Optional[SyncCursor]:
    result = await db.execute(
        select(SyncCursor).where(SyncCursor.stream_name == stream_name)
    )
    return result.scalar_one_or_none()


async def record_sync(
    db: AsyncSession,
    stream_name: str,
    synced_at: datetime,
    details: dict,
) -> SyncCursor:
    cursor = await get_cursor(db, stream_name)
    if cursor is None:
        cursor = SyncCursor(stream_name=stream_name)
        db.add(cursor)
    cursor.last_synced_at = synced_at
    cursor.details = details
    await db.commit()
    await db.refresh(cursor)
    return cursor
