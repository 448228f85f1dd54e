# storefront/api/errors.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from storefront.domain import errors
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# najbardziej szczegolowa klasa wygrywa (szukamy po MRO)
STATUS_BY_ERROR = {
    errors.StorefrontError: status.HTTP_400_BAD_REQUEST,
    errors.ValidationFailed: status.HTTP_400_BAD_REQUEST,
    errors.StateConflict: status.HTTP_409_CONFLICT,
    errors.CartNotActive: status.HTTP_400_BAD_REQUEST,
    errors.ItemNotFound: status.HTTP_404_NOT_FOUND,
    errors.VariantNotFound: status.HTTP_404_NOT_FOUND,
    errors.OrderNotFound: status.HTTP_404_NOT_FOUND,
    errors.EmptyCart: status.HTTP_400_BAD_REQUEST,
    errors.CartAlreadyConverted: status.HTTP_409_CONFLICT,
    errors.NotAuthenticated: status.HTTP_401_UNAUTHORIZED,
    errors.InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    errors.Forbidden: status.HTTP_403_FORBIDDEN,
    errors.PaymentDeclined: status.HTTP_402_PAYMENT_REQUIRED,
    errors.TransientError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(exc: errors.StorefrontError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return status.HTTP_400_BAD_REQUEST


def _body(message: str, code: str) -> dict:
    return {"error": message, "code": code}


async def storefront_error_handler(request: Request, exc: errors.StorefrontError):
    code = status_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=code, content=_body(exc.message, exc.code), headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg', 'invalid value')}" if field else "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_body(message, "invalid_request"))


async def storage_error_handler(request: Request, exc: OperationalError):
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=_body("Storage temporarily unavailable, please retry", "storage_unavailable"),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(errors.StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(OperationalError, storage_error_handler)
