from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    variant_id = Column(Integer, ForeignKey("product_variants.id"), nullable=False)

    quantity = Column(Integer, nullable=False)
    # snapshot ceny z chwili zamowienia, nigdy nie czytany ponownie z katalogu
    unit_price = Column(Integer, nullable=False)

    order = relationship("OrderModel", back_populates="items")
