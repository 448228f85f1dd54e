# storefront/domain/errors.py
# bledy domenowe, kazdy z `code`; mapowanie na HTTP w storefront/api/errors.py


class StorefrontError(Exception):
    code = "storefront_error"
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# --- validation: odrzucone przed jakimkolwiek zapisem ---

class ValidationFailed(StorefrontError):
    code = "validation_failed"


class InvalidQuantity(ValidationFailed):
    code = "invalid_quantity"
    default_message = "Quantity must be a positive integer"


class MissingField(ValidationFailed):
    code = "missing_field"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is required")


class InvalidStatus(ValidationFailed):
    code = "invalid_status"

    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown order status: {value!r}")


# --- state conflicts ---

class StateConflict(StorefrontError):
    code = "state_conflict"


class CartNotActive(StateConflict):
    code = "cart_not_active"
    default_message = "Cart can no longer be modified"


class ItemNotFound(StateConflict):
    code = "item_not_found"
    default_message = "Cart item not found"


class VariantNotFound(StateConflict):
    code = "variant_not_found"

    def __init__(self, variant_id):
        self.variant_id = variant_id
        super().__init__(f"Product variant {variant_id} not found")


class OrderNotFound(StateConflict):
    code = "order_not_found"
    default_message = "Order not found"


class EmptyCart(StateConflict):
    code = "empty_cart"
    default_message = "Cart is empty"


class CartAlreadyConverted(EmptyCart):
    code = "cart_already_converted"
    default_message = "Cart has already been converted into an order"


class CheckoutInProgress(StateConflict):
    code = "checkout_in_progress"
    default_message = "Another checkout for this cart is in progress"


class InvalidTransition(StateConflict):
    code = "invalid_transition"

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Order cannot move from {current} to {requested}")


class EmailAlreadyRegistered(StateConflict):
    code = "email_taken"
    default_message = "Email already registered"


# --- authorization ---

class AuthorizationError(StorefrontError):
    code = "unauthorized"


class NotAuthenticated(AuthorizationError):
    code = "not_authenticated"
    default_message = "Missing or invalid Authorization header"


class InvalidCredentials(AuthorizationError):
    code = "invalid_credentials"
    default_message = "Invalid email or password"


class Forbidden(AuthorizationError):
    code = "forbidden"
    default_message = "Access denied"


# --- payment ---

class PaymentDeclined(StorefrontError):
    code = "payment_declined"

    def __init__(self, reason: str | None = None):
        self.reason = reason
        super().__init__(f"Payment failed: {reason}" if reason else "Payment failed")


# --- transient ---

class TransientError(StorefrontError):
    code = "transient_error"


class CatalogUnavailable(TransientError):
    code = "catalog_unavailable"
    default_message = "Catalog service unavailable"


class LockUnavailable(TransientError):
    code = "lock_unavailable"
    default_message = "Checkout lock service unavailable, please retry"
