from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._columns import created_at_column, updated_at_column


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id"), nullable=False)

    # bez ceny - cena jest brana z katalogu w momencie zamowienia
    quantity = Column(Integer, nullable=False)

    created_at = created_at_column()
    updated_at = updated_at_column()

    cart = relationship("CartModel", back_populates="items")
    variant = relationship("ProductVariantModel")

    __table_args__ = (UniqueConstraint("cart_id", "variant_id", name="u_cart_variant"),)
