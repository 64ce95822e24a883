"""Categories and products: the admin-managed catalog around the ledger."""

from decimal import Decimal
from typing import List, Optional

from db import crud, models
from db.database import connect, unit_of_work
from utils.errors import CategoryNotFound, ConflictError, NotFoundError, ProductNotFound, ValidationError
from utils.logger import get_logger
from utils.pure import next_category_code, now_iso, to_money

_logger = get_logger(__name__)


# ---------------------------
# Categories
# ---------------------------


async def create_category(name: str, descr: Optional[str] = None) -> models.Category:
    """
    Create a category with the next sequential code (C001, C002, ...).

    The code is derived from the most recently inserted category while the
    write lock is held, so two concurrent creations cannot pick the same code.
    """
    if not (name or "").strip():
        raise ValidationError("Category name is required")
    async with unit_of_work() as conn:
        last = await crud.last_category(conn)
        code = next_category_code(last.code if last else None)
        if await crud.category_code_exists(conn, code):
            raise ConflictError("Category already existed")
        category = await crud.insert_category(conn, code, name.strip(), descr, now_iso())
    _logger.info(f"Category {category.code} '{category.name}' created")
    return category


async def get_category(cat_id: int) -> models.Category:
    async with connect() as conn:
        category = await crud.get_category(conn, cat_id)
    if category is None:
        raise CategoryNotFound()
    return category


async def list_categories() -> List[models.Category]:
    async with connect() as conn:
        categories = await crud.list_categories(conn)
    if not categories:
        raise NotFoundError("No categories found")
    return categories


async def update_category(
    cat_id: int, name: str, descr: Optional[str]
) -> models.Category:
    if not (name or "").strip() or not (descr or "").strip():
        raise ValidationError("Both name and description are required")
    async with unit_of_work() as conn:
        if not await crud.update_category(conn, cat_id, name.strip(), descr, now_iso()):
            raise CategoryNotFound()
        category = await crud.get_category(conn, cat_id)
    _logger.info(f"Category {category.code} updated")
    return category


async def delete_category(cat_id: int) -> None:
    async with unit_of_work() as conn:
        if not await crud.delete_category(conn, cat_id):
            raise CategoryNotFound()
    _logger.info(f"Category {cat_id} deleted")


# ---------------------------
# Products
# ---------------------------


def _to_price(value) -> Decimal:
    try:
        return to_money(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def _check_price_stock(price: Optional[Decimal], stock: Optional[int]) -> None:
    if price is not None and price < 0:
        raise ValidationError("Price cannot be negative")
    if stock is not None and stock < 0:
        raise ValidationError("Stock cannot be negative")


async def create_product(
    name: str,
    price,
    stock: int,
    cat_id: Optional[int] = None,
    descr: Optional[str] = None,
    image_urls: Optional[List[str]] = None,
) -> models.Product:
    if not (name or "").strip():
        raise ValidationError("Product name is required")
    price = _to_price(price)
    _check_price_stock(price, stock)
    async with unit_of_work() as conn:
        if cat_id is not None and await crud.get_category(conn, cat_id) is None:
            raise CategoryNotFound()
        product = await crud.insert_product(
            conn, name.strip(), descr, price, stock, cat_id, image_urls or [], now_iso()
        )
    _logger.info(f"Product {product.pid} '{product.name}' created with stock {product.stock}")
    return product


async def get_product(pid: int) -> models.Product:
    async with connect() as conn:
        product = await crud.get_product(conn, pid)
    if product is None:
        raise ProductNotFound()
    return product


async def list_products(cat_id: Optional[int] = None) -> List[models.Product]:
    async with connect() as conn:
        return await crud.list_products(conn, cat_id)


async def update_product(
    pid: int,
    name: Optional[str] = None,
    descr: Optional[str] = None,
    price=None,
    stock: Optional[int] = None,
    cat_id: Optional[int] = None,
    image_urls: Optional[List[str]] = None,
) -> models.Product:
    """Update only the provided fields of a product."""
    price = _to_price(price) if price is not None else None
    _check_price_stock(price, stock)
    async with unit_of_work() as conn:
        if await crud.get_product(conn, pid) is None:
            raise ProductNotFound()
        if cat_id is not None and await crud.get_category(conn, cat_id) is None:
            raise CategoryNotFound()
        await crud.update_product(
            conn,
            pid,
            now_iso(),
            name=name,
            descr=descr,
            price=price,
            stock=stock,
            cat_id=cat_id,
            image_urls=image_urls,
        )
        product = await crud.get_product(conn, pid)
    _logger.info(f"Product {pid} updated")
    return product


async def delete_product(pid: int) -> None:
    """
    Remove a product and any cart rows holding it.

    A product that has been ordered stays, since its orders still point at it.
    """
    async with unit_of_work() as conn:
        if await crud.get_product(conn, pid) is None:
            raise ProductNotFound()
        if await crud.product_has_orders(conn, pid):
            raise ConflictError("Product has orders and cannot be deleted")
        await crud.delete_product(conn, pid)
    _logger.info(f"Product {pid} deleted")
