# storefront/api/v1/routes_products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.deps import get_catalog_service
from storefront.domain.catalog.schemas import CategorySummary, Product, ProductPage, ProductQuery, VariantSkuOut
from storefront.domain.catalog.service import CatalogService


router = APIRouter(prefix="/api/v1", tags=["catalog"])


@router.get("/products", response_model=ProductPage)
async def list_products_endpoint(
    query: Optional[str] = None,
    category: Optional[str] = None,
    sort_by: str = Query("id", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=1000),
    refresh: bool = False,
    catalog: CatalogService = Depends(get_catalog_service),
):
    product_query = ProductQuery(
        text=query,
        category=category,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return await catalog.get_products(product_query, force_refresh=refresh)


@router.get("/products/variant-sku", response_model=VariantSkuOut)
async def variant_sku_endpoint(
    product_id: int = Query(..., alias="productId"),
    color: str = Query(..., min_length=1),
    size: str = Query(..., min_length=1),
    catalog: CatalogService = Depends(get_catalog_service),
):
    sku = await catalog.get_variant_sku(product_id, color, size)
    if sku is None:
        raise HTTPException(status_code=404, detail="Variant SKU not found for the specified combination")
    return VariantSkuOut(product_id=product_id, color=color, size=size, sku=sku)


@router.get("/products/{slug}", response_model=Product)
async def product_by_slug_endpoint(
    slug: str,
    refresh: bool = False,
    catalog: CatalogService = Depends(get_catalog_service),
):
    product = await catalog.get_product_by_slug(slug, force_refresh=refresh)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/categories", response_model=List[CategorySummary])
async def categories_endpoint(catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.get_categories()
