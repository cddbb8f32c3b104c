# storefront/domain/catalog/query.py
import math
from decimal import Decimal
from numbers import Number
from typing import Any, List, Sequence, Tuple

from .schemas import Pagination, Product, ProductPage, ProductQuery

SORT_ALIASES = {"product_id": "id", "productId": "id"}


def _field_name(sort_by: str) -> str:
    sort_by = SORT_ALIASES.get(sort_by, sort_by)
    if sort_by in Product.model_fields:
        return sort_by
    for name, info in Product.model_fields.items():
        if info.alias == sort_by:
            return name
    return ""


def _sort_key(value: Any) -> Tuple[int, Any]:
    # Numbers sort before strings so mixed columns never compare str to int.
    if value is None:
        return (0, 0)
    if isinstance(value, (Number, Decimal)):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (1, str(value))


def matches_text(product: Product, text: str) -> bool:
    needle = text.lower()
    return (
        needle in product.name.lower()
        or needle in product.description.lower()
        or any(needle in tag.lower() for tag in product.tags)
    )


def filter_products(products: Sequence[Product], query: ProductQuery) -> List[Product]:
    result = list(products)
    if query.text:
        result = [p for p in result if matches_text(p, query.text)]
    if query.category:
        result = [p for p in result if p.category == query.category]
    return result


def sort_products(products: Sequence[Product], sort_by: str, sort_order: str = "asc") -> List[Product]:
    field = _field_name(sort_by)
    return sorted(
        products,
        key=lambda p: _sort_key(getattr(p, field, None) if field else None),
        reverse=sort_order == "desc",
    )


def paginate(products: Sequence[Product], page: int, limit: int) -> ProductPage:
    total = len(products)
    pages = math.ceil(total / limit) if total else 0
    skip = (page - 1) * limit
    return ProductPage(
        products=list(products[skip:skip + limit]),
        pagination=Pagination(
            total=total,
            pages=pages,
            current=page,
            has_next=page < pages,
            has_prev=page > 1 and total > 0,
        ),
    )


def run_query(products: Sequence[Product], query: ProductQuery) -> ProductPage:
    filtered = filter_products(products, query)
    ordered = sort_products(filtered, query.sort_by, query.sort_order)
    return paginate(ordered, query.page, query.limit)
