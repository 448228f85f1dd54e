# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from datetime import datetime

from storefront.domain.enums import CartStatus, OrderStatus, PaymentStatus, Role


class ItemIn(BaseModel):
    """Schema dla dodawania wariantu produktu do koszyka."""

    # quantity walidowane w CartService (InvalidQuantity -> 400)
    variant_id: int = Field(..., gt=0, description="ID wariantu produktu")
    quantity: int = Field(..., description="Ilosc (musi byc > 0)")
    cart_id: int | None = Field(None, description="Opcjonalnie konkretny aktywny koszyk")


class ItemQuantityIn(BaseModel):
    """Schema dla ustawienia ilosci pozycji w koszyku."""

    quantity: int


class ProductBriefOut(BaseModel):
    id: int
    title: str
    image_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class VariantOut(BaseModel):
    """Wariant z aktualna cena katalogowa (w centach). Cena zamowienia liczona jest przy checkoucie."""

    id: int
    name: str
    sku: str | None
    price: int
    product: ProductBriefOut

    model_config = ConfigDict(from_attributes=True)


class CartItemOut(BaseModel):
    """Schema dla pozycji koszyka (response)."""

    id: int
    cart_id: int
    variant_id: int
    quantity: int
    variant: VariantOut
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    id: int
    user_id: int | None
    status: CartStatus
    items: List[CartItemOut]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    product_id: int
    variant_id: int
    quantity: int
    unit_price: int

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamowienia (response). Kwoty w centach."""

    id: int
    user_id: int | None
    cart_id: int
    total_amount: int
    currency: str
    status: OrderStatus
    payment_status: PaymentStatus
    items: List[OrderItemOut]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderStatusIn(BaseModel):
    """Brak statusu -> 400 missing_field, nieznany -> 400 invalid_status."""

    status: str | None = None


class OrderStatsOut(BaseModel):
    """Podsumowanie dla panelu admina."""

    total_orders: int
    paid_revenue: int
    currency: str
    by_status: dict[str, int]


class RegisterIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=1, max_length=100)


class LoginIn(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    id: int
    email: str
    name: str
    role: Role

    model_config = ConfigDict(from_attributes=True)


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
