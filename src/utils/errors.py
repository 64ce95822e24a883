"""
Error taxonomy shared by the workflows and the HTTP layer.

Every error carries the client-facing message and the HTTP status it maps to.
Anything that is not a ShopError is treated as an internal failure.
"""


class ShopError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ShopError):
    status_code = 400
    default_message = "Invalid request"


class ForbiddenError(ShopError):
    status_code = 403
    default_message = "Access Denied. Insufficient permissions"


# ---------------------------
# Not found
# ---------------------------


class NotFoundError(ShopError):
    status_code = 404
    default_message = "Not found"


class UserNotFound(NotFoundError):
    default_message = "User not found"


class ProductNotFound(NotFoundError):
    default_message = "Product not found"


class CategoryNotFound(NotFoundError):
    default_message = "Category not found"


class OrderNotFound(NotFoundError):
    default_message = "Order not found for the given email and orderId"


class CartItemNotFound(NotFoundError):
    default_message = "Cart item not found"


# ---------------------------
# Business rules
# ---------------------------


class InsufficientStockError(ShopError):
    status_code = 400

    def __init__(self, available: int):
        self.available = available
        super().__init__(f"Only {available} items left in stock")


class ConflictError(ShopError):
    status_code = 400
    default_message = "Conflict"


class OrderAlreadyCancelled(ConflictError):
    default_message = "Order is already cancelled"
