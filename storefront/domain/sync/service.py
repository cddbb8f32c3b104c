# storefront/domain/sync/service.py
"""One-way reconciliation of the sheet catalog into the relational store.

Orders need a product row with a stable numeric key, which the ephemeral
sheet catalog cannot give them. Each pass re-reads the sheet and creates or
updates durable products and variants; nothing is ever deleted here.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.errors import PersistenceError
from storefront.db.models.products import Product as ProductRow
from storefront.db.repositories import products as repo
from storefront.db.repositories.sync_cursors import get_cursor, record_sync
from storefront.domain.catalog.cache import TTLCache
from storefront.domain.catalog.grouping import group_rows
from storefront.domain.catalog.identity import IdentityMode
from storefront.domain.catalog.rows import parse_rows
from storefront.domain.catalog.schemas import Product, Variant
from storefront.domain.catalog.sheets import SheetSource
from .schemas import SyncResult, SyncStats, SyncStatus

logger = logging.getLogger(__name__)

SYNC_STREAM = "sheet-catalog"


def _product_values(product: Product) -> dict:
    return {
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "category": product.category,
        "type": product.type,
        "sku": product.sku,
        "images": list(product.images),
        "sizes": list(product.sizes),
        "is_new": product.is_new,
        "is_bestseller": product.is_bestseller,
    }


def _variant_values(variant: Variant) -> dict:
    return {
        "color_value": variant.color_value,
        "size": variant.size,
        "price": variant.price,
        "stock_quantity": variant.stock_quantity,
        "is_available": variant.is_available,
    }


class SheetSyncService:
    def __init__(
        self,
        source: SheetSource,
        cache: Optional[TTLCache] = None,
        identity_mode: IdentityMode = IdentityMode.LEGACY,
    ):
        self.source = source
        self.cache = cache
        self.identity_mode = IdentityMode(identity_mode)

    async def sync_from_sheet(self, db: AsyncSession) -> SyncResult:
        """Run one reconciliation pass.

        A failure to read the sheet propagates to the caller. Bad rows and
        failed product or variant writes are logged, counted in
        ``stats.errors`` and skipped.
        """
        logger.info("Starting sheet sync...")
        rows = await self.source.fetch_rows()
        stats = SyncStats()

        if not rows:
            logger.info("No data found in sheet")
            await self._record(db, stats)
            return SyncResult(success=True, message="No data to sync", stats=stats)

        report = parse_rows(rows, mode=self.identity_mode)
        stats.skipped = report.skipped
        stats.errors = report.errors

        for product in group_rows(report.rows, include_inactive_rows=True):
            stats.processed += 1
            try:
                row = await self._sync_product(db, product, stats)
            except Exception as exc:
                await db.rollback()
                stats.errors += 1
                logger.error("Error syncing product %s: %s", product.id, exc)
                continue

            await self._sync_variants(db, row.id, product, stats)
            stats.products += 1

        logger.info("Sheet sync completed: %s", stats.model_dump())
        await self._record(db, stats)
        if self.cache is not None:
            self.cache.invalidate()

        return SyncResult(success=True, message="Sync completed successfully", stats=stats)

    async def _sync_product(self, db: AsyncSession, product: Product, stats: SyncStats) -> ProductRow:
        values = _product_values(product)
        existing = await repo.find_product(db, sku=product.sku, name=product.name)
        if existing is not None:
            row = await repo.update_product(db, existing, updated_at=datetime.now(timezone.utc), **values)
            await db.commit()
            stats.updated += 1
        else:
            row = await repo.create_product(db, **values)
            await db.commit()
            stats.created += 1
        return row

    async def _sync_variants(self, db: AsyncSession, product_pk: int, product: Product, stats: SyncStats) -> None:
        for variant in product.variants:
            try:
                await self._sync_variant(db, product_pk, variant)
            except Exception as exc:
                await db.rollback()
                stats.errors += 1
                error = PersistenceError(str(exc), entity=variant.sku)
                logger.error("Error syncing variant %s: %s", error.entity, error)
                continue
            stats.variants += 1

    async def _sync_variant(self, db: AsyncSession, product_pk: int, variant: Variant) -> None:
        values = _variant_values(variant)
        existing = await repo.find_variant(db, product_pk, variant.color_name, variant.sku)
        if existing is not None:
            await repo.update_variant(db, existing, updated_at=datetime.now(timezone.utc), **values)
        else:
            await repo.create_variant(
                db,
                product_pk,
                color_name=variant.color_name,
                sku=variant.sku,
                **values,
            )
        await db.commit()

    async def _record(self, db: AsyncSession, stats: SyncStats) -> None:
        try:
            await record_sync(db, SYNC_STREAM, datetime.now(timezone.utc), stats.model_dump())
        except Exception as exc:
            await db.rollback()
            logger.error("Could not record sync cursor: %s", exc)


async def get_sync_status(db: AsyncSession) -> SyncStatus:
    cursor = await get_cursor(db, SYNC_STREAM)
    if cursor is None or cursor.last_synced_at is None:
        return SyncStatus(stream_name=SYNC_STREAM, status="never-synced")
    return SyncStatus(
        stream_name=SYNC_STREAM,
        status="ready",
        last_synced_at=cursor.last_synced_at,
        stats=SyncStats(**(cursor.details or {})),
    )
