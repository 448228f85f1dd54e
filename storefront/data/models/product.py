from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._columns import created_at_column, updated_at_column


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    image_url = Column(String(500), nullable=True)

    created_at = created_at_column()
    updated_at = updated_at_column()

    variants = relationship("ProductVariantModel", back_populates="product")


class ProductVariantModel(Base):
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    sku = Column(String(64), nullable=True, unique=True)

    # cena w centach
    price = Column(Integer, nullable=False)
    stock = Column(Integer, nullable=False, default=0)

    created_at = created_at_column()
    updated_at = updated_at_column()

    product = relationship("ProductModel", back_populates="variants")
