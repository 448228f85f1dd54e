# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_catalog, get_lock_service, get_payment_gateway, get_principal
from storefront.data.database import get_db
from storefront.domain.schemas import OrderOut, OrderStatsOut, OrderStatusIn
from storefront.services.identity import Principal
from storefront.services.order_service import OrderService
from storefront.services.order_status_service import OrderStatusService
from storefront.services.pricing_service import PricingService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    db: Session = Depends(get_db),
    catalog=Depends(get_catalog),
    payment_gateway=Depends(get_payment_gateway),
    lock_service=Depends(get_lock_service),
) -> OrderService:
    return OrderService(
        db=db,
        pricing=PricingService(catalog),
        payment_gateway=payment_gateway,
        lock_service=lock_service,
    )


def get_status_service(db: Session = Depends(get_db)) -> OrderStatusService:
    return OrderStatusService(db)


@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def create_order(
    principal: Principal = Depends(get_principal),
    svc: OrderService = Depends(get_service),
):
    """
    Tworzy zamowienie z aktywnego koszyka zalogowanego klienta.
    400 pusty koszyk, 402 odrzucona platnosc, 409 koszyk juz zamieniony.
    """
    return svc.create_order(principal)


@router.get("/mine", response_model=List[OrderOut])
def list_my_orders(
    principal: Principal = Depends(get_principal),
    svc: OrderService = Depends(get_service),
):
    return svc.list_my_orders(principal)


@router.get("/stats", response_model=OrderStatsOut)
def order_stats(
    principal: Principal = Depends(get_principal),
    svc: OrderService = Depends(get_service),
):
    return svc.stats(principal)


@router.get("", response_model=List[OrderOut])
def list_all_orders(
    principal: Principal = Depends(get_principal),
    svc: OrderService = Depends(get_service),
):
    return svc.list_all_orders(principal)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    principal: Principal = Depends(get_principal),
    svc: OrderService = Depends(get_service),
):
    return svc.get_order(order_id, principal)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: OrderStatusIn,
    principal: Principal = Depends(get_principal),
    svc: OrderStatusService = Depends(get_status_service),
):
    return svc.set_status(order_id, payload.status, principal)
