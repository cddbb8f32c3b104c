# storefront/db/models/product_variants.py
from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, Numeric, String, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.db.base import Base


class ProductVariant(Base):
    __tablename__ = "product_variants"

    """One purchasable colour/size combination of a durable product.

    Matched on ``(product_id, color_name, sku)`` by the sheet sync; stock,
    price and availability are refreshed on every pass.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    color_name = Column(String, nullable=False)
    color_value = Column(String, nullable=True)
    size = Column(String, nullable=True)
    sku = Column(String, nullable=False, unique=True)

    price = Column(Numeric(18, 2), nullable=False, default=0)
    stock_quantity = Column(Integer, nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    product = relationship("Product", back_populates="variants", lazy="noload")

    __table_args__ = (
        UniqueConstraint("product_id", "color_name", "sku", name="uq_product_variants_product_color_sku"),
        Index("ix_product_variants_product", "product_id"),
    )
