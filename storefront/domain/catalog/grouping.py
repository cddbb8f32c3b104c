# storefront/domain/catalog/grouping.py
import logging
import re
from typing import Dict, Iterable, List

from .images import normalize_images
from .schemas import Color, Product, Variant, VariantRow

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def variant_id(product_id: int, color_name: str, size: str) -> str:
    return _WHITESPACE_RE.sub("_", f"{product_id}_{color_name}_{size}")


def group_by_product(rows: Iterable[VariantRow]) -> Dict[int, List[VariantRow]]:
    """Partition rows by resolved product id, keeping first-seen order."""
    groups: Dict[int, List[VariantRow]] = {}
    for row in rows:
        groups.setdefault(row.product_id, []).append(row)
    return groups


def unique_sizes(rows: Iterable[VariantRow]) -> List[str]:
    return list(dict.fromkeys(row.size for row in rows if row.size))


def unique_colors(rows: Iterable[VariantRow]) -> List[Color]:
    colors: Dict[str, Color] = {}
    for row in rows:
        if row.color_name not in colors:
            colors[row.color_name] = Color(name=row.color_name, hex=row.color_hex)
    return list(colors.values())


def build_variant(row: VariantRow) -> Variant:
    return Variant(
        id=variant_id(row.product_id, row.color_name, row.size),
        product_id=row.product_id,
        color_name=row.color_name,
        color_value=row.color_hex,
        sku=row.variant_sku,
        price=row.variant_price,
        stock_quantity=row.stock_quantity,
        is_available=row.is_active and row.stock_quantity > 0,
        size=row.size,
        images=normalize_images(row.image_urls),
    )


def build_product(product_id: int, rows: List[VariantRow]) -> Product:
    base = rows[0]
    return Product(
        id=product_id,
        name=base.name,
        description=base.description,
        price=base.base_price,
        category=base.category,
        type=base.type,
        sku=str(product_id),
        images=normalize_images(base.image_urls),
        sizes=unique_sizes(rows),
        colors=unique_colors(rows),
        variants=[build_variant(row) for row in rows],
        tags=base.tag_list,
        is_new=base.is_new,
        is_bestseller=base.is_bestseller,
        created_at=base.created_date,
        updated_at=base.last_updated,
    )


def group_rows(rows: Iterable[VariantRow], include_inactive_rows: bool = False) -> List[Product]:
    """Fold variant rows into products.

    Storefront listings drop inactive rows before grouping. The sync path
    passes ``include_inactive_rows=True`` so an active product keeps its
    inactive variants (marked unavailable); either way a product whose first
    row is inactive is left out.
    """
    if not include_inactive_rows:
        rows = [row for row in rows if row.is_active]

    products = []
    for product_id, product_rows in group_by_product(rows).items():
        if not product_rows[0].is_active:
            logger.info("Skipping inactive product: %s", product_id)
            continue
        products.append(build_product(product_id, product_rows))
    return products
