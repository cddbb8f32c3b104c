# storefront/db/models/products.py
from sqlalchemy import Boolean, Column, Float, Integer, Numeric, String, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.db.base import Base, JSONType


class Product(Base):
    __tablename__ = "products"

    """Durable copy of a sheet product, used as the foreign key target for orders.

    ``sku`` holds the resolved product id as text; together with ``name`` it
    is how the sheet sync finds the row again on the next pass. Rows are
    created and updated by the sync, never deleted by it.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(18, 2), nullable=False, default=0)
    category = Column(String, nullable=True, index=True)
    type = Column(String, nullable=True)

    sku = Column(String, nullable=False, unique=True)
    images = Column(JSONType, nullable=False, default=list)
    sizes = Column(JSONType, nullable=False, default=list)

    is_new = Column(Boolean, nullable=False, default=False)
    is_bestseller = Column(Boolean, nullable=False, default=False)
    rating = Column(Float, nullable=False, default=0)
    reviews = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    variants = relationship("ProductVariant", back_populates="product", lazy="noload")
