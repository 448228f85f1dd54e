# storefront/services/order_status_service.py
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.enums import OrderStatus
from storefront.domain.errors import InvalidStatus, InvalidTransition, MissingField, OrderNotFound
from storefront.repos.order_repo import OrderRepo
from storefront.services.access_guard import AccessGuard
from storefront.services.identity import Principal
from storefront.utils.logging import get_logger
from storefront.utils.settings import ORDER_STATUS_STRICT_TRANSITIONS

logger = get_logger(__name__)

# uzywane tylko w trybie strict
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
}


def parse_status(value) -> OrderStatus:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingField("status")
    try:
        return OrderStatus(str(value).strip().upper())
    except ValueError:
        raise InvalidStatus(value)


class OrderStatusService:
    """
    Zmiana statusu zamowienia (tylko admin).

    Domyslnie permissive: kazdy znany status nadpisuje obecny, takze ze stanow
    terminalnych (COMPLETED -> CANCELLED przechodzi). strict=True wlacza graf
    ALLOWED_TRANSITIONS. Nigdy nie rusza pozycji ani payment_status.
    """

    def __init__(self, db: Session, guard: AccessGuard | None = None, strict: bool = ORDER_STATUS_STRICT_TRANSITIONS):
        self.repo = OrderRepo(db)
        self.guard = guard or AccessGuard()
        self.strict = strict

    def set_status(self, order_id: int, new_status, principal: Principal) -> OrderModel:
        self.guard.require_admin(principal)
        target = parse_status(new_status)

        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound()

        current = OrderStatus(order.status)
        if self.strict:
            if current == target:
                return order
            if current.is_terminal or target not in ALLOWED_TRANSITIONS[current]:
                raise InvalidTransition(current.value, target.value)

        updated = self.repo.update_order_status(order, target.value)
        logger.info(
            f"Order {order_id} status {current.value} -> {target.value} by admin {principal.subject_id}",
            extra={"order_id": order_id},
        )
        return updated
