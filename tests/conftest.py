import threading
import uuid

import pytest
from fastapi.testclient import TestClient

from storefront.api.deps import get_lock_service, get_payment_gateway
from storefront.celery_worker import celery_app
from storefront.data.database import create_session_factory
from storefront.data.models.product import ProductModel, ProductVariantModel
from storefront.domain.enums import Role
from storefront.main import create_app
from storefront.services.catalog import SqlCatalog
from storefront.services.identity import IdentityProvider, Principal
from storefront.services.payment_gateway import PaymentGateway, PaymentResult

celery_app.conf.task_always_eager = True


class InProcessLockService:
    """Same contract as LockService, backed by threading locks instead of Redis."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}
        self._tokens = {}

    def acquire_checkout_lock(self, cart_id, ttl=30, wait=5.0):
        with self._guard:
            lock = self._locks.setdefault(cart_id, threading.Lock())
        if not lock.acquire(timeout=wait):
            return None
        token = uuid.uuid4().hex
        self._tokens[cart_id] = token
        return token

    def release_checkout_lock(self, cart_id, token):
        if self._tokens.get(cart_id) != token:
            return False
        del self._tokens[cart_id]
        self._locks[cart_id].release()
        return True


class RecordingGateway(PaymentGateway):
    def __init__(self, approve=True, reason="card_declined"):
        self.approve = approve
        self.reason = reason
        self.calls = []
        self._lock = threading.Lock()

    def authorize(self, customer_id, amount, currency):
        with self._lock:
            self.calls.append((customer_id, amount, currency))
        if self.approve:
            return PaymentResult(approved=True, reference=f"test_{len(self.calls)}")
        return PaymentResult(approved=False, reason=self.reason)


@pytest.fixture()
def session_factory(tmp_path):
    return create_session_factory(f"sqlite:///{tmp_path / 'storefront.db'}", create_tables=True)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def catalog(db):
    return SqlCatalog(db)


@pytest.fixture()
def variants(db):
    """Two variants priced 1999 and 9999 cents."""
    shirt = ProductModel(title="Premium T-Shirt", description="Cotton")
    shirt.variants = [ProductVariantModel(name="Small", sku="TSHIRT-S", price=1999, stock=50)]
    phones = ProductModel(title="Headphones", description="Over-ear")
    phones.variants = [ProductVariantModel(name="Black", sku="HEAD-BLK", price=9999, stock=10)]
    db.add_all([shirt, phones])
    db.commit()
    return shirt.variants[0], phones.variants[0]


def _principal_for(db, email, role=Role.CUSTOMER):
    user = IdentityProvider(db).register(email, "secret123", email.split("@")[0], role=role)
    return Principal(subject_id=user.id, role=role)


@pytest.fixture()
def customer(db):
    return _principal_for(db, "alice@example.com")


@pytest.fixture()
def other_customer(db):
    return _principal_for(db, "bob@example.com")


@pytest.fixture()
def admin(db):
    return _principal_for(db, "admin@example.com", Role.ADMIN)


@pytest.fixture()
def lock_service():
    return InProcessLockService()


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def app(session_factory, lock_service, gateway):
    app = create_app(session_factory)
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def auth_headers(db):
    identity = IdentityProvider(db)

    def _headers(principal):
        return {"Authorization": f"Bearer {identity.issue_token(principal)}"}

    return _headers
