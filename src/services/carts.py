"""
Cart store: one row per (user, product) holding a quantity and a line total.

Adding to the cart only checks stock; nothing is taken out of inventory
until an order is placed. The line total grows additively on repeated adds
but is recomputed from the current unit price on a quantity update.
"""

from typing import List

from db import crud, models
from db.database import connect, unit_of_work
from services import identity, inventory
from utils.errors import CartItemNotFound, ProductNotFound, ValidationError
from utils.logger import get_logger
from utils.pure import line_total, now_iso

_logger = get_logger(__name__)


def _require_fields(email, pid, qty) -> None:
    if not email or pid is None or qty is None:
        raise ValidationError("Email, productId and quantity are required")
    inventory.validate_quantity(qty)


async def add_item(email: str, pid: int, qty: int) -> models.CartItem:
    """
    Add qty of pid to the user's cart, creating the row on first add.
    """
    _require_fields(email, pid, qty)
    async with unit_of_work() as conn:
        user = await identity.require_user(conn, email)
        product = await inventory.check_available(conn, pid, qty)
        added = line_total(product.price, qty)
        now = now_iso()

        existing = await crud.get_cart_item(conn, user.uid, pid)
        if existing is None:
            item = await crud.insert_cart_item(conn, user.uid, pid, qty, added, now)
        else:
            item = await crud.update_cart_item(
                conn, existing.cart_id, existing.qty + qty, existing.price + added, now
            )
    _logger.info(f"Cart {user.email}: +{qty} of product {pid} (now {item.qty})")
    return item


async def update_quantity(email: str, pid: int, qty: int) -> models.CartItem:
    """
    Set the cart quantity of pid to qty and recompute the line total.
    """
    _require_fields(email, pid, qty)
    async with unit_of_work() as conn:
        user = await identity.require_user(conn, email)
        if await crud.get_product(conn, pid) is None:
            raise ProductNotFound()
        existing = await crud.get_cart_item(conn, user.uid, pid)
        if existing is None:
            raise CartItemNotFound()
        product = await inventory.check_available(conn, pid, qty)
        item = await crud.update_cart_item(
            conn, existing.cart_id, qty, line_total(product.price, qty), now_iso()
        )
    _logger.info(f"Cart {user.email}: product {pid} set to {qty}")
    return item


async def remove_item(email: str, cart_id: int) -> None:
    if not email or cart_id is None:
        raise ValidationError("Email and CartId are required")
    async with unit_of_work() as conn:
        user = await identity.require_user(conn, email)
        if not await crud.delete_cart_item(conn, user.uid, cart_id):
            raise CartItemNotFound()
    _logger.info(f"Cart {user.email}: removed item {cart_id}")


async def list_items(email: str) -> List[models.CartLine]:
    """The user's cart lines; an empty list when the cart is empty."""
    if not email:
        raise ValidationError("Email is required")
    async with connect() as conn:
        user = await identity.require_user(conn, email)
        return await crud.list_cart(conn, user.uid)


async def clear(email: str) -> int:
    async with unit_of_work() as conn:
        user = await identity.require_user(conn, email)
        removed = await crud.clear_cart(conn, user.uid)
    _logger.info(f"Cart {user.email}: cleared {removed} items")
    return removed
