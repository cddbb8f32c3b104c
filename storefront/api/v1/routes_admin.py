# storefront/api/v1/routes_admin.py
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.deps import get_catalog_service, get_sync_service, require_cron_secret
from storefront.db.base import get_db
from storefront.domain.catalog.schemas import WarmupResult
from storefront.domain.catalog.service import CatalogService
from storefront.domain.sync.schemas import SyncResult, SyncStatus
from storefront.domain.sync.service import SheetSyncService, get_sync_status


router = APIRouter(prefix="/api/v1", tags=["admin"])


@router.post("/admin/sync", response_model=SyncResult)
async def sync_now_endpoint(
    db: AsyncSession = Depends(get_db),
    sync: SheetSyncService = Depends(get_sync_service),
):
    return await sync.sync_from_sheet(db)


@router.get("/admin/sync", response_model=SyncStatus)
async def sync_status_endpoint(db: AsyncSession = Depends(get_db)):
    return await get_sync_status(db)


@router.post("/cron/sync", response_model=SyncResult, dependencies=[Depends(require_cron_secret)])
async def cron_sync_endpoint(
    db: AsyncSession = Depends(get_db),
    sync: SheetSyncService = Depends(get_sync_service),
):
    return await sync.sync_from_sheet(db)


@router.post("/admin/cache/clear")
async def clear_cache_endpoint(
    pattern: Optional[str] = None,
    catalog: CatalogService = Depends(get_catalog_service),
):
    removed = catalog.clear_cache(pattern)
    return {"success": True, "pattern": pattern, "removed": removed}


@router.post("/admin/cache/warm", response_model=WarmupResult)
async def warm_cache_endpoint(
    images: bool = False,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.warm_cache(include_images=images)
