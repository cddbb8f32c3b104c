# storefront/domain/catalog/service.py
import asyncio
import logging
from collections import Counter
from typing import List, Optional

from storefront.domain.catalog.identity import IdentityMode, slugify
from .cache import TTLCache
from .grouping import group_rows
from .query import run_query
from .rows import parse_rows
from .schemas import CategorySummary, Product, ProductPage, ProductQuery, WarmupResult
from .sheets import SheetSource
from .warmer import ImageWarmer, collect_image_urls

logger = logging.getLogger(__name__)

PRODUCT_KEY_PREFIX = "product-"

# Listings requested most often by the shop pages.
WARMUP_QUERIES = (
    ProductQuery(),
    ProductQuery(category="tshirt"),
    ProductQuery(category="hoodie"),
    ProductQuery(sort_by="isBestseller", sort_order="desc"),
)


class CatalogService:
    """Read-through view of the sheet catalog used by the shop pages.

    Every cache miss re-reads the sheet and rebuilds the product list; the
    result is shared by all pages of that listing until it expires.
    """

    def __init__(
        self,
        source: SheetSource,
        cache: TTLCache,
        catalog_ttl: float = None,
        product_ttl: float = None,
        identity_mode: IdentityMode = IdentityMode.LEGACY,
        warmer: ImageWarmer = None,
    ):
        self.source = source
        self.cache = cache
        self.catalog_ttl = catalog_ttl
        self.product_ttl = product_ttl
        self.identity_mode = IdentityMode(identity_mode)
        self.warmer = warmer or ImageWarmer()

    async def load_products(self) -> List[Product]:
        """Fetch, parse and group the whole sheet. Raises RemoteFetchError."""
        rows = await self.source.fetch_rows()
        report = parse_rows(rows, mode=self.identity_mode)
        if report.skipped or report.errors:
            logger.warning(
                "Catalog build skipped %d rows and hit %d row errors",
                report.skipped,
                report.errors,
            )
        return group_rows(report.rows)

    async def _catalog(self, key: str, force_refresh: bool = False) -> List[Product]:
        products = None if force_refresh else self.cache.get(key)
        if products is not None:
            logger.debug("Cache hit for %s", key)
            return products

        logger.info("Cache miss for %s, fetching from Google Sheets", key)
        products = await self.load_products()
        self.cache.set(key, products, self.catalog_ttl)
        return products

    async def get_products(self, query: ProductQuery = None, force_refresh: bool = False) -> ProductPage:
        query = query or ProductQuery()
        products = await self._catalog(query.cache_key(), force_refresh)
        return run_query(products, query)

    async def all_products(self, force_refresh: bool = False) -> List[Product]:
        return await self._catalog(ProductQuery().cache_key(), force_refresh)

    async def get_product_by_slug(self, slug: str, force_refresh: bool = False) -> Optional[Product]:
        key = f"{PRODUCT_KEY_PREFIX}{slug}"
        if not force_refresh:
            product = self.cache.get(key)
            if product is not None:
                return product

        products = await self.all_products(force_refresh)
        product = next((p for p in products if slugify(p.name) == slug), None)
        if product is None:
            return None

        self.cache.set(key, product, self.product_ttl)
        return product

    async def get_variant_sku(self, product_id: int, color: str, size: str) -> Optional[str]:
        for product in await self.all_products():
            if product.id != product_id:
                continue
            for variant in product.variants:
                if variant.color_name.lower() == color.lower() and variant.size.lower() == size.lower():
                    return variant.sku
        return None

    async def get_categories(self) -> List[CategorySummary]:
        counts = Counter(product.category for product in await self.all_products())
        return [
            CategorySummary(name=name, slug=slugify(name), count=count)
            for name, count in sorted(counts.items())
        ]

    def clear_cache(self, pattern: str = None) -> int:
        removed = self.cache.invalidate(pattern)
        logger.info("Cache invalidated for pattern: %s (%d entries)", pattern or "all", removed)
        return removed

    async def warm_cache(self, include_images: bool = False) -> WarmupResult:
        results = await asyncio.gather(
            *(self.get_products(query) for query in WARMUP_QUERIES),
            return_exceptions=True,
        )
        failed = [r for r in results if isinstance(r, Exception)]
        for exc in failed:
            logger.warning("Cache warm-up query failed: %s", exc)

        images = None
        if include_images and len(failed) < len(results):
            urls = collect_image_urls(await self.all_products())
            images = await self.warmer.warm(urls)

        return WarmupResult(warmed=len(results) - len(failed), failed=len(failed), images=images)
