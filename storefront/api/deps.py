# storefront/api/deps.py
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import NotAuthenticated
from storefront.services.catalog import HttpCatalogClient, SqlCatalog
from storefront.services.identity import IdentityProvider, Principal
from storefront.services.lock_service import LockService
from storefront.services.payment_gateway import AlwaysApproveGateway, PaymentGateway
from storefront.utils.settings import CATALOG_SERVICE_URL


def get_identity(db: Session = Depends(get_db)) -> IdentityProvider:
    return IdentityProvider(db)


def get_principal(
    request: Request,
    authorization: str | None = Header(None),
    identity: IdentityProvider = Depends(get_identity),
) -> Principal:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise NotAuthenticated()

    principal = identity.verify(token)
    request.state.user_id = principal.subject_id
    return principal


def get_catalog(db: Session = Depends(get_db)):
    if CATALOG_SERVICE_URL:
        return HttpCatalogClient(CATALOG_SERVICE_URL)
    return SqlCatalog(db)


def get_payment_gateway() -> PaymentGateway:
    return AlwaysApproveGateway()


def get_lock_service() -> LockService:
    return LockService()
