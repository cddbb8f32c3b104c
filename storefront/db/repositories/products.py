# storefront/db/repositories/products.py
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from storefront.db.models.product_variants import ProductVariant
from storefront.db.models.products import Product


async def find_product(
    db: AsyncSession,
    sku: str,
    name: str,
) -> Optional[Product]:
    result = await db.execute(
        select(Product)
        .where(or_(Product.sku == sku, Product.name == name))
        .order_by((Product.sku == sku).desc(), Product.id)
        .limit(1)
    )
    return result.scalars().first()


async def create_product(db: AsyncSession, **values) -> Product:
    product = Product(rating=0, reviews=0, **values)
    db.add(product)
    await db.flush()
    return product


async def update_product(db: AsyncSession, product: Product, **values) -> Product:
    for field, value in values.items():
        setattr(product, field, value)
    await db.flush()
    return product


async def find_variant(
    db: AsyncSession,
    product_id: int,
    color_name: str,
    sku: str,
) -> Optional[ProductVariant]:
    result = await db.execute(
        select(ProductVariant).where(
            ProductVariant.product_id == product_id,
            ProductVariant.color_name == color_name,
            ProductVariant.sku == sku,
        )
    )
    return result.scalar_one_or_none()


async def create_variant(db: AsyncSession, product_id: int, **values) -> ProductVariant:
    variant = ProductVariant(product_id=product_id, **values)
    db.add(variant)
    await db.flush()
    return variant


async def update_variant(db: AsyncSession, variant: ProductVariant, **values) -> ProductVariant:
    for field, value in values.items():
        setattr(variant, field, value)
    await db.flush()
    return variant
