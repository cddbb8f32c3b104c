# storefront/api/deps.py
from fastapi import Header, HTTPException, Request, status

from storefront.core.config import settings
from storefront.domain.catalog.service import CatalogService
from storefront.domain.sync.service import SheetSyncService


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog


def get_sync_service(request: Request) -> SheetSyncService:
    return request.app.state.sync


def require_cron_secret(authorization: str = Header(default=None)) -> None:
    if settings.CRON_SECRET and authorization != f"Bearer {settings.CRON_SECRET}":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
