# storefront/domain/sync/schemas.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SyncStats(BaseModel):
    processed: int = 0
    created: int = 0
    updated: int = 0
    errors: int = 0
    skipped: int = 0
    products: int = 0
    variants: int = 0


class SyncResult(BaseModel):
    success: bool
    message: str
    stats: SyncStats


class SyncStatus(BaseModel):
    stream_name: str
    status: str
    last_synced_at: Optional[datetime] = None
    stats: Optional[SyncStats] = None
