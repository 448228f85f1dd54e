# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# taski musza byc zaimportowane zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "storefront.tasks.abandon",
    "storefront.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "abandon-idle-carts-hourly": {
        "task": "storefront.tasks.abandon.abandon_idle_carts_task",
        "schedule": 3600.0,
    },
}

celery_app.conf.timezone = "UTC"
