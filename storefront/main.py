from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.api.v1.routes_admin import router as admin_router
from storefront.api.v1.routes_products import router as products_router
from storefront.core.config import Settings, settings
from storefront.core.errors import RemoteFetchError, SheetNotConfiguredError
from storefront.core.logging import setup_logging
from storefront.db.base import init_models
from storefront.domain.catalog.cache import TTLCache
from storefront.domain.catalog.service import CatalogService
from storefront.domain.catalog.sheets import GoogleSheetSource, SheetSource
from storefront.domain.catalog.warmer import ImageWarmer
from storefront.domain.sync.service import SheetSyncService


def build_services(app: FastAPI, config: Settings = settings, source: SheetSource = None) -> None:
    """Composition root: one cache and one sheet client per process."""
    source = source or GoogleSheetSource(config)
    cache = TTLCache(default_ttl=config.default_cache_ttl)
    app.state.cache = cache
    app.state.catalog = CatalogService(
        source,
        cache,
        catalog_ttl=config.CATALOG_CACHE_TTL,
        product_ttl=config.PRODUCT_CACHE_TTL,
        identity_mode=config.IDENTITY_MODE,
        warmer=ImageWarmer(batch_size=config.IMAGE_WARM_BATCH_SIZE, timeout=config.IMAGE_WARM_TIMEOUT),
    )
    app.state.sync = SheetSyncService(source, cache=cache, identity_mode=config.IDENTITY_MODE)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.DB_CREATE_TABLES:
        await init_models()
    if not hasattr(app.state, "catalog"):
        build_services(app)
    yield


app = FastAPI(title="Storefront Catalog API", lifespan=lifespan)

app.include_router(products_router)
app.include_router(admin_router)


@app.exception_handler(SheetNotConfiguredError)
async def sheet_not_configured_handler(request: Request, exc: SheetNotConfiguredError):
    return JSONResponse(
        status_code=503,
        content={"error": "Google Sheets not configured", "message": str(exc)},
    )


@app.exception_handler(RemoteFetchError)
async def remote_fetch_handler(request: Request, exc: RemoteFetchError):
    return JSONResponse(
        status_code=502,
        content={"error": "Failed to fetch products from sheet", "message": str(exc)},
    )


@app.get("/health")
async def health():
    return {"status": "ok"}
