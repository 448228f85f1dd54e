# storefront/services/cart_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models._columns import utcnow
from storefront.domain.enums import CartStatus
from storefront.domain.errors import CartNotActive, InvalidQuantity, ItemNotFound, StateConflict, VariantNotFound
from storefront.repos.cart_repo import CartRepo
from storefront.services.access_guard import AccessGuard
from storefront.services.identity import Principal
from storefront.services.lock_service import cart_lock
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# ile razy probujemy ponownie po przegranym wyscigu o utworzenie / zapis koszyka
_CONFLICT_RETRIES = 3


def _validate_quantity(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity()


class CartService:
    """
    Jedyny zapisujacy do koszyka i jego pozycji.
    Kazda modyfikacja idzie pod lockiem koszyka (tym samym co checkout),
    wiec koszyk nie zmieni sie w trakcie platnosci. carts.version podbijane
    przy kazdym zapisie (optimistic locking).
    """

    def __init__(self, db: Session, catalog, lock_service, guard: AccessGuard | None = None):
        self.repo = CartRepo(db)
        self.catalog = catalog
        self.locks = lock_service
        self.guard = guard or AccessGuard()

    #query
    def get_or_create_active_cart(self, customer_id: int) -> CartModel:
        for _ in range(_CONFLICT_RETRIES):
            existing = self.repo.get_active_cart_by_user(customer_id)
            if existing:
                return existing

            try:
                created = self.repo.create_cart(
                    CartModel(user_id=customer_id, status=CartStatus.ACTIVE.value, version=1, items=[])
                )
            except IntegrityError:
                # partial unique index (user_id WHERE ACTIVE) - ktos byl szybszy, czytamy jego koszyk
                self.repo.rollback()
                logger.info(f"Lost cart creation race for user {customer_id}, re-reading")
                continue

            logger.info(f"Created cart {created.id} for user {customer_id}")
            return created

        raise StateConflict("Could not obtain an active cart, please retry")

    #commands
    def add_item(
        self,
        principal: Principal,
        variant_id: int,
        quantity: int,
        cart_id: int | None = None,
    ) -> tuple[CartItemModel, bool]:
        """
        Dodaje wariant do koszyka. Ten sam wariant drugi raz zwieksza ilosc
        zamiast tworzyc nowy wiersz. Zwraca (pozycja, czy_utworzona).
        """
        _validate_quantity(quantity)

        if self.catalog.get_variant(variant_id) is None:
            raise VariantNotFound(variant_id)

        for attempt in range(_CONFLICT_RETRIES):
            cart = self._writable_cart(principal, cart_id)

            with cart_lock(self.locks, cart.id):
                # trwajacy checkout mogl skonczyc zanim dostalismy lock
                cart = self.repo.get_cart(cart.id)
                if cart.status != CartStatus.ACTIVE.value:
                    if cart_id is not None:
                        raise CartNotActive()
                    logger.info(f"Cart {cart.id} closed while waiting for lock, retry {attempt + 1}")
                    continue

                try:
                    existing_item = self.repo.get_cart_item(cart.id, variant_id)
                    if existing_item:
                        logger.info(
                            f"Variant {variant_id} already in cart {cart.id}, quantity "
                            f"{existing_item.quantity} -> {existing_item.quantity + quantity}"
                        )
                        existing_item.quantity += quantity
                        item, created = self.repo.add_cart_item(existing_item), False
                    else:
                        item = self.repo.add_cart_item(
                            CartItemModel(cart_id=cart.id, variant_id=variant_id, quantity=quantity)
                        )
                        created = True

                    if self._bump_version(cart):
                        self.repo.commit()
                        return self.repo.get_item(item.id), created

                    self.repo.rollback()
                except IntegrityError:
                    # rownolegle pierwsze dodanie tego samego wariantu (u_cart_variant)
                    self.repo.rollback()
                except Exception:
                    self.repo.rollback()
                    raise

            logger.info(f"Concurrent modification of cart {cart.id}, retry {attempt + 1}")

        raise StateConflict("Cart was modified concurrently, please retry")

    def set_item_quantity(self, principal: Principal, item_id: int, quantity: int) -> CartItemModel:
        _validate_quantity(quantity)

        _, cart = self._owned_active_item(principal, item_id)
        with cart_lock(self.locks, cart.id):
            item, cart = self._owned_active_item(principal, item_id)
            try:
                item.quantity = quantity
                self.repo.add_cart_item(item)
                if not self._bump_version(cart):
                    raise StateConflict("Cart was modified concurrently, please retry")
                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        logger.info(f"Cart item {item_id} quantity set to {quantity}")
        return self.repo.get_item(item_id)

    def remove_item(self, principal: Principal, item_id: int) -> None:
        _, cart = self._owned_active_item(principal, item_id)
        with cart_lock(self.locks, cart.id):
            _, cart = self._owned_active_item(principal, item_id)
            try:
                self.repo.delete_cart_item(item_id)
                if not self._bump_version(cart):
                    raise StateConflict("Cart was modified concurrently, please retry")
                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        logger.info(f"Cart item {item_id} removed from cart {cart.id}")

    #helpers
    def _writable_cart(self, principal: Principal, cart_id: int | None) -> CartModel:
        if cart_id is None:
            return self.get_or_create_active_cart(principal.subject_id)

        cart = self.repo.get_cart(cart_id)
        if cart is None:
            raise CartNotActive("Cart not found")
        self.guard.require_owner(principal, cart)
        if cart.status != CartStatus.ACTIVE.value:
            raise CartNotActive()
        return cart

    def _owned_active_item(self, principal: Principal, item_id: int) -> tuple[CartItemModel, CartModel]:
        # brak pozycji, cudzy koszyk albo koszyk nieaktywny -> ten sam 404
        item = self.repo.get_item(item_id)
        if item is None:
            raise ItemNotFound()

        cart = self.repo.get_cart(item.cart_id)
        if not self.guard.is_owner(principal.subject_id, cart) or cart.status != CartStatus.ACTIVE.value:
            raise ItemNotFound()
        return item, cart

    def _bump_version(self, cart: CartModel) -> bool:
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={
                "version": cart.version + 1,
                "updated_at": utcnow(),
            },
        )
        return rowcount == 1
