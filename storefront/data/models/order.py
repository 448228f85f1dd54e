from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._columns import created_at_column, updated_at_column


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    # jedno zamowienie na koszyk
    cart_id = Column(Integer, ForeignKey("carts.id"), nullable=False, unique=True)

    total_amount = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    status = Column(String(20), nullable=False, default="PENDING")  # PENDING, PROCESSING, COMPLETED, CANCELLED
    payment_status = Column(String(20), nullable=False, default="PENDING")  # PENDING, PAID, FAILED

    created_at = created_at_column()
    updated_at = updated_at_column()

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
