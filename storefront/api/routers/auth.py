# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, status

from storefront.api.deps import get_identity, get_principal
from storefront.domain.schemas import LoginIn, RegisterIn, TokenOut, UserRead
from storefront.services.identity import IdentityProvider, Principal

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterIn, identity: IdentityProvider = Depends(get_identity)):
    user = identity.register(payload.email, payload.password, payload.name)
    principal = identity.authenticate(payload.email, payload.password)
    return TokenOut(access_token=identity.issue_token(principal), user=UserRead.model_validate(user))


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, identity: IdentityProvider = Depends(get_identity)):
    principal = identity.authenticate(payload.email, payload.password)
    user = identity.get_user(principal)
    return TokenOut(access_token=identity.issue_token(principal), user=UserRead.model_validate(user))


@router.get("/me", response_model=UserRead)
def me(
    principal: Principal = Depends(get_principal),
    identity: IdentityProvider = Depends(get_identity),
):
    return identity.get_user(principal)
