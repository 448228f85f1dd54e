# storefront/services/notification_service.py
from kombu.exceptions import OperationalError

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienia po zlozeniu zamowienia, przez Celery.
    Zamowienie jest juz zacommitowane, wiec niedostepny broker nie cofa zamowienia.
    """

    def send_order_notification(self, user_id: int, order_id: int) -> bool:
        try:
            send_order_notification_task.delay(user_id, order_id)
        except OperationalError as e:
            logger.warning(
                f"Could not queue notification for order {order_id}: {e}",
                extra={"order_id": order_id},
            )
            return False
        return True


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int):
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} is being processed")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
