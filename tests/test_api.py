import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from conftest import FakeSheetSource
from storefront import main
from storefront.core.config import Settings, settings
from storefront.core.errors import RemoteFetchError, SheetNotConfiguredError
from storefront.db.base import get_db, init_models
from storefront.main import app, build_services


def _db_override(url):
    engine = create_async_engine(url, poolclass=NullPool)
    Session = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    ready = False

    async def _get_db():
        nonlocal ready
        if not ready:
            await init_models(engine)
            ready = True
        async with Session() as session:
            yield session

    return _get_db


@pytest.fixture
def startup_calls(monkeypatch):
    calls = []

    async def _init_models(bind=None):
        calls.append(bind)

    monkeypatch.setattr(main, "init_models", _init_models)
    monkeypatch.setattr(settings, "DB_CREATE_TABLES", True)
    return calls


@pytest.fixture
def make_client(tmp_path, startup_calls):
    def _make(source):
        build_services(app, Settings(), source=source)
        app.dependency_overrides[get_db] = _db_override(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, sheet_source):
    with make_client(sheet_source) as test_client:
        yield test_client


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_products_uses_camel_case_contract(client):
    response = client.get("/api/v1/products", params={"sortBy": "price", "sortOrder": "desc", "limit": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {"total": 2, "pages": 2, "current": 1, "hasNext": True, "hasPrev": False}
    product = body["products"][0]
    assert product["name"] == "Premium Hoodie"
    assert product["isBestseller"] is True
    assert product["variants"][0]["colorValue"] == "#000000"
    assert product["variants"][0]["isAvailable"] is True


def test_list_products_text_search(client):
    body = client.get("/api/v1/products", params={"query": "hood"}).json()

    assert [p["name"] for p in body["products"]] == ["Premium Hoodie"]


def test_list_products_rejects_bad_paging(client):
    assert client.get("/api/v1/products", params={"page": 0}).status_code == 422
    assert client.get("/api/v1/products", params={"sortOrder": "up"}).status_code == 422


def test_product_by_slug(client):
    response = client.get("/api/v1/products/cotton-tee")

    assert response.status_code == 200
    assert response.json()["sizes"] == ["S", "M"]
    assert client.get("/api/v1/products/missing").status_code == 404


def test_variant_sku_lookup(client):
    ok = client.get("/api/v1/products/variant-sku", params={"productId": 7, "color": "Black", "size": "L"})
    missing = client.get("/api/v1/products/variant-sku", params={"productId": 7, "color": "Pink", "size": "L"})

    assert ok.status_code == 200
    assert ok.json() == {"success": True, "productId": 7, "color": "Black", "size": "L", "sku": "HOOD-BLK-L"}
    assert missing.status_code == 404


def test_categories(client):
    body = client.get("/api/v1/categories").json()

    assert body == [
        {"name": "hoodie", "slug": "hoodie", "count": 1},
        {"name": "tshirt", "slug": "tshirt", "count": 1},
    ]


def test_remote_failure_is_explicit(make_client):
    with make_client(FakeSheetSource(error=RemoteFetchError("quota exceeded"))) as client:
        response = client.get("/api/v1/products")

    assert response.status_code == 502
    assert response.json()["message"] == "quota exceeded"


def test_unconfigured_sheet_is_503(make_client):
    with make_client(FakeSheetSource(error=SheetNotConfiguredError("LIVE_SHEET_ID not configured"))) as client:
        response = client.get("/api/v1/products/anything")

    assert response.status_code == 503


def test_sync_now_and_status(client):
    assert client.get("/api/v1/admin/sync").json()["status"] == "never-synced"

    response = client.post("/api/v1/admin/sync")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["stats"]["products"] == 2
    assert body["stats"]["variants"] == 4

    status = client.get("/api/v1/admin/sync").json()
    assert status["status"] == "ready"
    assert status["stats"]["created"] == 2


def test_cron_sync_requires_secret(client, monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", "s3cret")

    assert client.post("/api/v1/cron/sync").status_code == 401
    assert client.post("/api/v1/cron/sync", headers={"Authorization": "Bearer wrong"}).status_code == 401
    response = client.post("/api/v1/cron/sync", headers={"Authorization": "Bearer s3cret"})
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_clear_and_warm_cache(client):
    client.get("/api/v1/products")

    cleared = client.post("/api/v1/admin/cache/clear", params={"pattern": "sheet-products"}).json()
    warmed = client.post("/api/v1/admin/cache/warm").json()

    assert cleared == {"success": True, "pattern": "sheet-products", "removed": 1}
    assert warmed == {"warmed": 4, "failed": 0, "images": None}


def test_startup_creates_tables(client, startup_calls):
    assert startup_calls == [None]


def test_startup_table_creation_can_be_disabled(make_client, sheet_source, startup_calls, monkeypatch):
    monkeypatch.setattr(settings, "DB_CREATE_TABLES", False)

    with make_client(sheet_source) as client:
        assert client.get("/health").status_code == 200

    assert startup_calls == []
