# storefront/services/payment_gateway.py
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PaymentResult:
    approved: bool
    reason: str | None = None
    reference: str | None = None


class PaymentGateway(ABC):
    """Synchroniczna autoryzacja platnosci, wywolywana przed jakimkolwiek zapisem zamowienia."""

    @abstractmethod
    def authorize(self, customer_id: int, amount: int, currency: str) -> PaymentResult:
        ...


class AlwaysApproveGateway(PaymentGateway):
    def authorize(self, customer_id: int, amount: int, currency: str) -> PaymentResult:
        reference = f"fake_{uuid.uuid4().hex[:12]}"
        logger.info(f"Payment approved for user {customer_id}: {amount} {currency} ({reference})")
        return PaymentResult(approved=True, reference=reference)


class DecliningGateway(PaymentGateway):
    def __init__(self, reason: str = "card_declined"):
        self.reason = reason

    def authorize(self, customer_id: int, amount: int, currency: str) -> PaymentResult:
        logger.info(f"Payment declined for user {customer_id}: {amount} {currency} ({self.reason})")
        return PaymentResult(approved=False, reason=self.reason)
