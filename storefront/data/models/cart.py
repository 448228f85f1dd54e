# storefront/data/models/cart.py
from sqlalchemy import Column, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._columns import created_at_column, updated_at_column


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    # NULL = koszyk goscia
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    status = Column(String(20), nullable=False, default="ACTIVE")
    version = Column(Integer, nullable=False, default=1)

    created_at = created_at_column()
    updated_at = updated_at_column()

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )

    __table_args__ = (
        # co najwyzej jeden ACTIVE koszyk na uzytkownika, pilnowane przez baze
        Index(
            "uq_carts_user_active",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'ACTIVE'"),
            postgresql_where=text("status = 'ACTIVE'"),
        ),
    )
