"""
Inventory ledger: the only code that changes a product's stock count.

All functions take the caller's connection and must run inside its
transaction (see db.database.transaction), so a reservation commits or
rolls back together with the record that depends on it.
"""

import aiosqlite

from db import crud, models
from utils.errors import InsufficientStockError, ProductNotFound, ValidationError
from utils.logger import get_logger
from utils.pure import fits_sqlite_int

_logger = get_logger(__name__)


def validate_quantity(qty) -> None:
    if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
        raise ValidationError("Quantity must be a positive integer")


async def reserve(conn: aiosqlite.Connection, pid: int, qty: int) -> None:
    """
    Take qty units of pid out of stock.

    Raises ProductNotFound if pid does not exist, InsufficientStockError
    (carrying the units left) if fewer than qty remain. Stock is unchanged
    on failure.
    """
    validate_quantity(qty)
    # a quantity past the INTEGER range can never be in stock
    if fits_sqlite_int(qty) and await crud.decrement_stock_if_available(conn, pid, qty):
        _logger.debug(f"Reserved {qty} of product {pid}")
        return

    available = await crud.product_stock(conn, pid)
    if available is None:
        raise ProductNotFound()
    _logger.warning(f"Reservation of {qty} of product {pid} refused, {available} left")
    raise InsufficientStockError(available)


async def release(conn: aiosqlite.Connection, pid: int, qty: int) -> None:
    """Put qty units of pid back into stock."""
    validate_quantity(qty)
    if not fits_sqlite_int(qty):
        raise ValidationError("Quantity too large")
    if not await crud.increment_stock(conn, pid, qty):
        raise ProductNotFound()
    _logger.debug(f"Released {qty} of product {pid}")


async def check_available(
    conn: aiosqlite.Connection, pid: int, qty: int
) -> models.Product:
    """
    Return the product if at least qty units are in stock, without taking them.
    """
    validate_quantity(qty)
    product = await crud.get_product(conn, pid)
    if product is None:
        raise ProductNotFound()
    if qty > product.stock:
        _logger.warning(f"Requested {qty} of product {pid}, {product.stock} left")
        raise InsufficientStockError(product.stock)
    return product
