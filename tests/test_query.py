from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.domain.catalog.query import paginate, run_query, sort_products
from storefront.domain.catalog.schemas import Product, ProductQuery


def product(pid, name="Item", price=10, category="tshirt", tags=(), description="", is_bestseller=False):
    return Product(
        id=pid,
        name=name,
        description=description,
        price=Decimal(str(price)),
        category=category,
        type="clothing",
        sku=str(pid),
        tags=list(tags),
        is_bestseller=is_bestseller,
    )


@pytest.fixture
def catalog():
    return [
        product(1, "Premium Hoodie", 59, "hoodie", tags=["winter"]),
        product(2, "Cotton Tee", 19, "tshirt", description="Soft everyday tee"),
        product(3, "Graphic Tee", 25, "tshirt", tags=["Hoodless", "print"], is_bestseller=True),
    ]


def test_text_search_matches_name_case_insensitively(catalog):
    page = run_query(catalog[:2], ProductQuery(text="hood"))

    assert [p.name for p in page.products] == ["Premium Hoodie"]


def test_text_search_matches_description_and_tags(catalog):
    assert [p.id for p in run_query(catalog, ProductQuery(text="EVERYDAY")).products] == [2]
    assert [p.id for p in run_query(catalog, ProductQuery(text="hood")).products] == [1, 3]


def test_category_filter_is_exact(catalog):
    assert [p.id for p in run_query(catalog, ProductQuery(category="tshirt")).products] == [2, 3]
    assert run_query(catalog, ProductQuery(category="TShirt")).products == []


def test_sort_by_price_both_directions(catalog):
    asc = run_query(catalog, ProductQuery(sort_by="price"))
    desc = run_query(catalog, ProductQuery(sort_by="price", sort_order="desc"))

    assert [p.id for p in asc.products] == [2, 3, 1]
    assert [p.id for p in desc.products] == [1, 3, 2]


def test_sort_accepts_camel_case_aliases(catalog):
    page = run_query(catalog, ProductQuery(sort_by="isBestseller", sort_order="desc"))

    assert page.products[0].id == 3


def test_unknown_sort_field_keeps_original_order(catalog):
    shuffled = [catalog[2], catalog[0], catalog[1]]

    assert [p.id for p in sort_products(shuffled, "popularity")] == [3, 1, 2]
    assert [p.id for p in sort_products(shuffled, "product_id")] == [1, 2, 3]


def test_sort_by_name_is_lexicographic(catalog):
    assert [p.name for p in sort_products(catalog, "name")] == ["Cotton Tee", "Graphic Tee", "Premium Hoodie"]


def test_pagination_of_25_items():
    items = [product(i) for i in range(1, 26)]

    first = paginate(items, page=1, limit=10)
    last = paginate(items, page=3, limit=10)

    assert len(first.products) == 10
    assert first.pagination.total == 25
    assert first.pagination.pages == 3
    assert first.pagination.has_next is True
    assert first.pagination.has_prev is False
    assert len(last.products) == 5
    assert last.pagination.has_next is False
    assert last.pagination.has_prev is True


def test_page_past_the_end_is_empty():
    page = paginate([product(1)], page=4, limit=10)

    assert page.products == []
    assert page.pagination.current == 4
    assert page.pagination.has_next is False


def test_empty_input_returns_empty_page():
    page = run_query([], ProductQuery(page=2, limit=5))

    assert page.products == []
    assert page.pagination.model_dump() == {
        "total": 0,
        "pages": 0,
        "current": 2,
        "has_next": False,
        "has_prev": False,
    }


def test_query_validation():
    with pytest.raises(ValidationError):
        ProductQuery(page=0)
    with pytest.raises(ValidationError):
        ProductQuery(sort_order="sideways")


def test_cache_key_ignores_pagination():
    assert ProductQuery(text="tee", page=1).cache_key() == ProductQuery(text="tee", page=5, limit=3).cache_key()
    assert ProductQuery(text="tee").cache_key() != ProductQuery(text="tee", category="hoodie").cache_key()
