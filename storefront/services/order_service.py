# storefront/services/order_service.py
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models._columns import utcnow
from storefront.domain.enums import CartStatus, OrderStatus, PaymentStatus
from storefront.domain.errors import (
    CartAlreadyConverted,
    EmptyCart,
    OrderNotFound,
    PaymentDeclined,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.access_guard import AccessGuard
from storefront.services.identity import Principal
from storefront.services.lock_service import LockService, cart_lock
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import PaymentGateway
from storefront.services.pricing_service import PricingService
from storefront.utils.logging import get_logger
from storefront.utils.settings import CURRENCY

logger = get_logger(__name__)


class OrderService:
    """
    Zamiana aktywnego koszyka w niezmienne zamowienie.

    Kolejnosc w create_order:
    1. lock koszyka (Redis) - ten sam bierze CartService, wiec koszyk jest zamrozony
       od odczytu do commitu i platnosc nie pojdzie dwa razy
    2. swiezy odczyt koszyka i pozycji, ceny z katalogu
    3. autoryzacja platnosci - nic jeszcze nie jest zapisane
    4. jedna transakcja: order + order_items + koszyk CONVERTED (warunkowo po version)
    """

    def __init__(
        self,
        db: Session,
        pricing: PricingService,
        payment_gateway: PaymentGateway,
        lock_service: LockService,
        notifier: NotificationService | None = None,
        guard: AccessGuard | None = None,
        currency: str = CURRENCY,
    ):
        self.db = db
        self.carts = CartRepo(db)
        self.repo = OrderRepo(db)
        self.pricing = pricing
        self.payment_gateway = payment_gateway
        self.lock_service = lock_service
        self.notifier = notifier or NotificationService()
        self.guard = guard or AccessGuard()
        self.currency = currency

    def create_order(self, principal: Principal) -> OrderModel:
        customer_id = principal.subject_id

        cart = self.carts.get_active_cart_by_user(customer_id)
        if not cart:
            raise EmptyCart()
        cart_id = cart.id

        with cart_lock(self.lock_service, cart_id):
            order = self._assemble(customer_id, cart_id)

        logger.info(
            f"Order {order.id} created from cart {cart_id}, total {order.total_amount} {order.currency}",
            extra={"order_id": order.id, "cart_id": cart_id},
        )
        self.notifier.send_order_notification(customer_id, order.id)
        return order

    def _assemble(self, customer_id: int, cart_id: int) -> OrderModel:
        # po zdobyciu locka czytamy jeszcze raz - poprzedni checkout mogl juz skonczyc
        cart = self.carts.get_cart(cart_id)
        if cart is None or cart.status != CartStatus.ACTIVE.value:
            raise CartAlreadyConverted()
        cart_version = cart.version

        items = self.carts.get_cart_items(cart_id)
        if not items:
            raise EmptyCart()

        lines = self.pricing.price_line_items(items)
        total = self.pricing.total(lines)

        result = self.payment_gateway.authorize(customer_id, total, self.currency)
        if not result.approved:
            logger.info(f"Payment declined for cart {cart_id}: {result.reason}", extra={"cart_id": cart_id})
            raise PaymentDeclined(result.reason)

        try:
            order = OrderModel(
                user_id=customer_id,
                cart_id=cart_id,
                total_amount=total,
                currency=self.currency,
                status=OrderStatus.PROCESSING.value,
                payment_status=PaymentStatus.PAID.value,
                items=[
                    OrderItemModel(
                        product_id=line.variant.product_id,
                        variant_id=line.variant.id,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                    )
                    for line in lines
                ],
            )
            self.repo.add_order(order)

            rowcount = self.carts.update_cart_version(
                cart_id=cart_id,
                old_version=cart_version,
                new_data={
                    "status": CartStatus.CONVERTED.value,
                    "version": cart_version + 1,
                    "updated_at": utcnow(),
                },
            )
            if rowcount == 0:
                # nie powinno sie zdarzyc pod lockiem (np. lock wygasl po TTL)
                raise CartAlreadyConverted("Cart changed during checkout, please retry")

            self.db.commit()
        except IntegrityError:
            # orders.cart_id unique - zamowienie dla tego koszyka juz istnieje
            self.db.rollback()
            raise CartAlreadyConverted()
        except BaseException:
            self.db.rollback()
            raise

        return order

    #queries
    def get_order(self, order_id: int, principal: Principal) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound()
        self.guard.require_owner_or_admin(principal, order)
        return order

    def list_my_orders(self, principal: Principal) -> List[OrderModel]:
        return self.repo.list_orders(user_id=principal.subject_id)

    def list_all_orders(self, principal: Principal) -> List[OrderModel]:
        self.guard.require_admin(principal)
        return self.repo.list_orders()

    def stats(self, principal: Principal) -> dict:
        self.guard.require_admin(principal)
        by_status = {s.value: 0 for s in OrderStatus}
        by_status.update(self.repo.count_by_status())
        return {
            "total_orders": sum(by_status.values()),
            "paid_revenue": self.repo.paid_revenue(),
            "currency": self.currency,
            "by_status": by_status,
        }
