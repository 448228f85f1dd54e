# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_catalog, get_lock_service, get_principal
from storefront.data.database import get_db
from storefront.domain.schemas import CartItemOut, CartOut, ItemIn, ItemQuantityIn
from storefront.services.cart_service import CartService
from storefront.services.identity import Principal

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(
    db: Session = Depends(get_db),
    catalog=Depends(get_catalog),
    lock_service=Depends(get_lock_service),
) -> CartService:
    return CartService(db=db, catalog=catalog, lock_service=lock_service)


@router.get("", response_model=CartOut)
def get_cart(
    principal: Principal = Depends(get_principal),
    svc: CartService = Depends(get_service),
):
    return svc.get_or_create_active_cart(principal.subject_id)


@router.post("/items", response_model=CartItemOut)
def add_item(
    payload: ItemIn,
    response: Response,
    principal: Principal = Depends(get_principal),
    svc: CartService = Depends(get_service),
):
    """201 gdy pozycja utworzona, 200 gdy zwiekszona ilosc istniejacej."""
    item, created = svc.add_item(
        principal,
        variant_id=payload.variant_id,
        quantity=payload.quantity,
        cart_id=payload.cart_id,
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return item


@router.put("/items/{item_id}", response_model=CartItemOut)
def update_item(
    item_id: int,
    payload: ItemQuantityIn,
    principal: Principal = Depends(get_principal),
    svc: CartService = Depends(get_service),
):
    return svc.set_item_quantity(principal, item_id, payload.quantity)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_item(
    item_id: int,
    principal: Principal = Depends(get_principal),
    svc: CartService = Depends(get_service),
):
    svc.remove_item(principal, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
