# storefront/repos/cart_repo.py
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductVariantModel
from storefront.data.models._columns import utcnow


# pozycje zawsze z wariantem i produktem (nazwa, aktualna cena do wyswietlenia)
_ITEM_DETAILS = selectinload(CartItemModel.variant).selectinload(ProductVariantModel.product)


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    # populate_existing: zawsze swiezy stan z bazy, nie z identity map
    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id, populate_existing=True)

    def get_active_cart_by_user(self, user_id: int) -> CartModel | None:
        stmt = (
            select(CartModel)
            .where(CartModel.user_id == user_id, CartModel.status == "ACTIVE")
            .options(selectinload(CartModel.items).options(_ITEM_DETAILS))
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        return cart

    def get_cart_items(self, cart_id: int) -> List[CartItemModel]:
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_cart_item(self, cart_id: int, variant_id: int) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.cart_id == cart_id,
            CartItemModel.variant_id == variant_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_item(self, item_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id, populate_existing=True, options=[_ITEM_DETAILS])

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, item_id: int) -> int:
        res = self.db.execute(delete(CartItemModel).where(CartItemModel.id == item_id))
        return res.rowcount

    def update_cart_version(self, cart_id: int, old_version: int, new_data: Dict[str, Any]) -> int:
        """
        Optimistic locking: UPDATE ... WHERE id = :id AND version = :old_version.
        Zwraca liczbe zmienionych wierszy (0 = ktos nas wyprzedzil).
        """
        stmt = (
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def list_idle_cart_ids(self, idle_since: datetime) -> List[int]:
        stmt = select(CartModel.id).where(CartModel.status == "ACTIVE", CartModel.updated_at < idle_since)
        return list(self.db.execute(stmt).scalars().all())

    def abandon_cart(self, cart_id: int, idle_since: datetime) -> int:
        # warunki powtorzone, bo koszyk mogl sie zmienic od listowania
        stmt = (
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.status == "ACTIVE", CartModel.updated_at < idle_since)
            .values(status="ABANDONED", version=CartModel.version + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
