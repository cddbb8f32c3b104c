"""Shared fixtures: canned sheet rows, a fake sheet source and SQLite stores."""

from typing import Any, List

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.core.errors import RemoteFetchError
from storefront.db.base import init_models
from storefront.domain.catalog.cache import TTLCache


def make_row(
    key="1",
    name="Premium Hoodie",
    color="Black",
    size="M",
    sku="HOOD-BLK-M",
    *,
    description="Heavyweight fleece hoodie",
    category="hoodie",
    type="clothing",
    base_price=49.99,
    color_hex="#000000",
    variant_price="",
    stock=10,
    images=("", "", "", ""),
    tags="winter, fleece",
    is_new="",
    is_bestseller="",
    is_active="",
    created="2024-01-01",
    updated="2024-01-02",
) -> List[Any]:
    """One sheet row in column order A..V."""
    images = list(images) + [""] * (4 - len(images))
    return [
        key, name, description, category, type, base_price,
        color, color_hex, size, sku, variant_price, stock,
        *images,
        tags, is_new, is_bestseller, is_active, created, updated,
    ]


class FakeSheetSource:
    def __init__(self, rows=None, error: Exception = None):
        self.rows = rows or []
        self.error = error
        self.calls = 0

    async def fetch_rows(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return [list(row) if isinstance(row, list) else row for row in self.rows]


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TTLCache(default_ttl=60, clock=clock)


@pytest.fixture
def tshirt_rows():
    return [
        make_row("TSHIRT-001", "Cotton Tee", "Red", "S", "A", category="tshirt", tags="basic"),
        make_row("TSHIRT-001", "Cotton Tee", "Red", "M", "B", category="tshirt", tags="basic"),
        make_row("TSHIRT-001", "Cotton Tee", "Blue", "S", "C", color_hex="#0000FF", category="tshirt", tags="basic"),
    ]


@pytest.fixture
def sheet_source(tshirt_rows):
    rows = tshirt_rows + [
        make_row("7", "Premium Hoodie", "Black", "L", "HOOD-BLK-L", base_price=59, is_bestseller="TRUE"),
    ]
    return FakeSheetSource(rows)


@pytest.fixture
def failing_source():
    return FakeSheetSource(error=RemoteFetchError("quota exceeded"))


@pytest_asyncio.fixture
async def db_session():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(engine)
    Session = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session
    await engine.dispose()
