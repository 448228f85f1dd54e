# storefront/main.py
from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker
import uvicorn

from storefront.api.errors import register_error_handlers
from storefront.api.routers import auth, carts, health, orders
from storefront.data.database import default_session_factory
from storefront.utils.logging import RequestLoggingMiddleware, get_logger, setup_logging
from storefront.utils.settings import SERVICE_NAME

logger = get_logger(__name__)


def create_app(session_factory: sessionmaker | None = None) -> FastAPI:
    app = FastAPI(
        title="Storefront",
        version="1.0.0",
    )

    # jawny kontekst bazy zamiast globalnego handle'a
    app.state.session_factory = session_factory or default_session_factory()

    app.add_middleware(RequestLoggingMiddleware, service_name=SERVICE_NAME)
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app


def run():
    setup_logging(SERVICE_NAME)
    logger.info("Starting storefront API")
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
