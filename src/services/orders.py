"""
Order workflow: place an order for a single product and cancel it.

Placing an order reserves stock and inserts the order row in one
transaction. Cancelling only flips the status; stock is not returned.
"""

from typing import Dict, FrozenSet, List

from db import crud, models
from db.database import connect, unit_of_work
from db.models import OrderStatus
from services import identity, inventory
from utils.errors import (
    NotFoundError,
    OrderAlreadyCancelled,
    OrderNotFound,
    ProductNotFound,
    ValidationError,
)
from utils.logger import get_logger
from utils.pure import line_total, now_iso

_logger = get_logger(__name__)

TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CANCELLED}),
    OrderStatus.CANCELLED: frozenset(),
}

_REQUIRED_MESSAGE = (
    "All fields (email, productId, quantity, address, city, zipcode, "
    "deliveryDate, courierName) are required"
)


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in TRANSITIONS[current]


def _validate_request(email, pid, qty, shipping: models.ShippingDetails) -> None:
    texts = (email, shipping.address, shipping.city, shipping.zipcode, shipping.courier_name)
    if any(not (t or "").strip() for t in texts):
        raise ValidationError(_REQUIRED_MESSAGE)
    if pid is None or qty is None or shipping.delivery_date is None:
        raise ValidationError(_REQUIRED_MESSAGE)
    inventory.validate_quantity(qty)


async def place_order(
    email: str, pid: int, qty: int, shipping: models.ShippingDetails
) -> models.Order:
    """
    Reserve qty of pid for the user and record a Pending order.

    Either both the stock decrement and the order row are committed, or
    neither is.
    """
    _validate_request(email, pid, qty, shipping)
    async with unit_of_work() as conn:
        user = await identity.require_user(conn, email)
        product = await crud.get_product(conn, pid)
        if product is None:
            raise ProductNotFound()

        await inventory.reserve(conn, pid, qty)
        order = await crud.insert_order(
            conn, user.uid, pid, qty, line_total(product.price, qty), shipping, now_iso()
        )
    _logger.info(
        f"Order {order.ono} placed by {user.email}: {qty} x product {pid} = {order.total_amount}"
    )
    return order


async def cancel_order(email: str, ono: int) -> models.Order:
    async with unit_of_work() as conn:
        user = await identity.require_user(conn, email)
        order = await crud.get_order(conn, user.uid, ono)
        if order is None:
            raise OrderNotFound()
        if not can_transition(order.status, OrderStatus.CANCELLED):
            raise OrderAlreadyCancelled()

        await crud.set_order_status(conn, ono, OrderStatus.CANCELLED, now_iso())
        order = await crud.get_order(conn, user.uid, ono)
    _logger.info(f"Order {ono} cancelled by {user.email}")
    return order


async def list_orders(email: str) -> List[models.OrderView]:
    if not email:
        raise ValidationError("Email is required")
    async with connect() as conn:
        user = await identity.require_user(conn, email)
        views = await crud.list_order_views(conn, user.uid)
    if not views:
        raise NotFoundError("No orders found for this user")
    return views


async def get_order(email: str, ono: int) -> models.OrderView:
    async with connect() as conn:
        user = await identity.require_user(conn, email)
        view = await crud.get_order_view(conn, user.uid, ono)
    if view is None:
        raise OrderNotFound()
    return view


async def list_all_orders() -> List[models.OrderView]:
    async with connect() as conn:
        views = await crud.list_order_views(conn)
    if not views:
        raise NotFoundError("No orders found")
    return views
