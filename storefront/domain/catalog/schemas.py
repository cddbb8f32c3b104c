# storefront/domain/catalog/schemas.py
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class VariantRow(BaseModel):
    """One validated spreadsheet line: a single colour/size variant of a product."""

    line: int = 0
    product_id: int
    external_product_key: str
    name: str
    description: str = ""
    category: str = "uncategorized"
    type: str = "clothing"
    base_price: Decimal = Field(default=Decimal("0"), ge=0)

    color_name: str = Field(..., min_length=1)
    color_hex: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    variant_sku: str = Field(..., min_length=1)
    variant_price: Decimal = Decimal("0")
    stock_quantity: int = Field(default=0, ge=0)

    image_urls: List[str] = Field(default_factory=list, max_length=4)
    tags: str = ""

    is_new: bool = False
    is_bestseller: bool = False
    is_active: bool = True

    created_date: str = ""
    last_updated: str = ""

    @property
    def tag_list(self) -> List[str]:
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]


class Color(BaseModel):
    name: str
    hex: str


class Variant(CamelModel):
    id: str
    product_id: int
    color_name: str
    color_value: str
    sku: str
    price: Decimal
    stock_quantity: int
    is_available: bool
    size: str
    images: List[str] = Field(default_factory=list)


class Product(CamelModel):
    id: int
    name: str
    description: str
    price: Decimal
    category: str
    type: str
    sku: str
    images: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    colors: List[Color] = Field(default_factory=list)
    variants: List[Variant] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    is_new: bool = False
    is_bestseller: bool = False
    rating: float = 0
    reviews: int = 0
    created_at: str = ""
    updated_at: str = ""


class ProductQuery(BaseModel):
    text: Optional[str] = None
    category: Optional[str] = None
    sort_by: str = "id"
    sort_order: str = Field(default="asc", pattern="^(asc|desc)$")
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=12, ge=1)

    def cache_key(self) -> str:
        # Pagination is left out so every page of one listing shares an entry.
        return f"sheet-products-{self.text or ''}-{self.category or ''}-{self.sort_by}-{self.sort_order}"


class Pagination(CamelModel):
    total: int
    pages: int
    current: int
    has_next: bool
    has_prev: bool


class ProductPage(CamelModel):
    products: List[Product]
    pagination: Pagination


class CategorySummary(CamelModel):
    name: str
    slug: str
    count: int


class VariantSkuOut(CamelModel):
    success: bool = True
    product_id: int
    color: str
    size: str
    sku: str


class ImageWarmupResult(BaseModel):
    success: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)


class WarmupResult(CamelModel):
    warmed: int
    failed: int
    images: Optional[ImageWarmupResult] = None
