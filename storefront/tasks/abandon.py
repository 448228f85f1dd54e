# storefront/tasks/abandon.py
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from storefront.celery_worker import celery_app
from storefront.data.database import default_session_factory
from storefront.repos.cart_repo import CartRepo
from storefront.services.lock_service import LockService
from storefront.utils.logging import get_logger
from storefront.utils.settings import CART_ABANDON_AFTER_SECONDS

logger = get_logger(__name__)


def abandon_idle_carts(
    db: Session,
    locks,
    now: datetime | None = None,
    idle_seconds: int = CART_ABANDON_AFTER_SECONDS,
) -> int:
    """
    ACTIVE koszyki bez zmian dluzej niz idle_seconds -> ABANDONED. Nigdy nie sa usuwane.
    Koszyk z zajetym lockiem (trwa checkout albo edycja) jest pomijany do nastepnego przebiegu.
    """
    now = now or datetime.now(timezone.utc)
    idle_since = now - timedelta(seconds=idle_seconds)
    repo = CartRepo(db)

    count = 0
    for cart_id in repo.list_idle_cart_ids(idle_since):
        token = locks.acquire_checkout_lock(cart_id, wait=0)
        if token is None:
            logger.info(f"Cart {cart_id} is locked, skipping", extra={"cart_id": cart_id})
            continue
        try:
            count += repo.abandon_cart(cart_id, idle_since)
            repo.commit()
        except Exception:
            repo.rollback()
            raise
        finally:
            locks.release_checkout_lock(cart_id, token)

    logger.info(f"Abandoned {count} idle carts")
    return count


@celery_app.task(name="storefront.tasks.abandon.abandon_idle_carts_task")
def abandon_idle_carts_task():
    logger.info("Abandon idle carts task started")

    db = default_session_factory()()
    try:
        return abandon_idle_carts(db, LockService())
    finally:
        db.close()
