# src/db/crud.py
# Repository functions. Each takes the caller's connection and never commits;
# the workflow that opened the transaction decides commit or rollback.
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from sqlite3 import Row
from typing import List, Optional

import aiosqlite

from db import models
from utils.pure import dump_urls, fits_sqlite_int, load_urls

_PRODUCT_COLUMNS = "pid, name, descr, price, stock, cat_id, image_urls, created_at, updated_at"
_ORDER_COLUMNS = (
    "ono, uid, pid, qty, total_amount, status, address, city, zipcode, "
    "delivery_date, courier_name, created_at, updated_at"
)


async def _fetchone(conn: aiosqlite.Connection, sql: str, params=()) -> Optional[Row]:
    cur = await conn.execute(sql, params)
    row = await cur.fetchone()
    await cur.close()
    return row


async def _fetchall(conn: aiosqlite.Connection, sql: str, params=()) -> List[Row]:
    cur = await conn.execute(sql, params)
    rows = await cur.fetchall()
    await cur.close()
    return list(rows)


def _row_to_user(row: Row) -> models.User:
    return models.User(
        uid=row["uid"],
        email=row["email"],
        pwd=row["pwd"],
        role=models.Role(row["role"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _row_to_category(row: Row) -> models.Category:
    return models.Category(
        cat_id=row["cat_id"],
        code=row["code"],
        name=row["name"],
        descr=row["descr"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _row_to_product(row: Row) -> models.Product:
    return models.Product(
        pid=row["pid"],
        name=row["name"],
        descr=row["descr"],
        price=Decimal(row["price"]),
        stock=int(row["stock"]),
        cat_id=row["cat_id"],
        image_urls=tuple(load_urls(row["image_urls"])),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _row_to_cart_item(row: Row) -> models.CartItem:
    return models.CartItem(
        cart_id=row["cart_id"],
        uid=row["uid"],
        pid=row["pid"],
        qty=int(row["qty"]),
        price=Decimal(row["price"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _row_to_shipping(row: Row) -> models.ShippingDetails:
    return models.ShippingDetails(
        address=row["address"],
        city=row["city"],
        zipcode=row["zipcode"],
        delivery_date=date.fromisoformat(row["delivery_date"]),
        courier_name=row["courier_name"],
    )


def _row_to_order(row: Row) -> models.Order:
    return models.Order(
        ono=row["ono"],
        uid=row["uid"],
        pid=row["pid"],
        qty=int(row["qty"]),
        total_amount=Decimal(row["total_amount"]),
        status=models.OrderStatus(row["status"]),
        shipping=_row_to_shipping(row),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _row_to_order_view(row: Row) -> models.OrderView:
    return models.OrderView(
        ono=row["ono"],
        email=row["email"],
        product_name=row["product_name"],
        qty=int(row["qty"]),
        total_amount=Decimal(row["total_amount"]),
        status=models.OrderStatus(row["status"]),
        shipping=_row_to_shipping(row),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


# ---------------------------
# Users
# ---------------------------


async def email_available(conn: aiosqlite.Connection, email: str) -> bool:
    """True if no user already registered with the given email."""
    row = await _fetchone(conn, "SELECT 1 FROM users WHERE email = ? LIMIT 1;", (email,))
    return row is None


async def insert_user(
    conn: aiosqlite.Connection, email: str, pwd_hash: str, role: str, now: str
) -> models.User:
    cur = await conn.execute(
        "INSERT INTO users(email, pwd, role, created_at) VALUES (?, ?, ?, ?);",
        (email, pwd_hash, role, now),
    )
    uid = cur.lastrowid
    await cur.close()
    return await get_user(conn, uid)


async def get_user(conn: aiosqlite.Connection, uid: int) -> Optional[models.User]:
    row = await _fetchone(
        conn, "SELECT uid, email, pwd, role, created_at FROM users WHERE uid = ?;", (uid,)
    )
    return _row_to_user(row) if row else None


async def get_user_by_email(
    conn: aiosqlite.Connection, email: str
) -> Optional[models.User]:
    row = await _fetchone(
        conn,
        "SELECT uid, email, pwd, role, created_at FROM users WHERE email = ?;",
        (email,),
    )
    return _row_to_user(row) if row else None


async def list_users(conn: aiosqlite.Connection) -> List[models.User]:
    rows = await _fetchall(
        conn, "SELECT uid, email, pwd, role, created_at FROM users ORDER BY uid;"
    )
    return [_row_to_user(r) for r in rows]


# ---------------------------
# Categories
# ---------------------------


async def last_category(conn: aiosqlite.Connection) -> Optional[models.Category]:
    """The category with the highest id, or None when there are none."""
    row = await _fetchone(
        conn,
        """
        SELECT cat_id, code, name, descr, created_at, updated_at
        FROM categories
        ORDER BY cat_id DESC
        LIMIT 1;
        """,
    )
    return _row_to_category(row) if row else None


async def category_code_exists(conn: aiosqlite.Connection, code: str) -> bool:
    row = await _fetchone(conn, "SELECT 1 FROM categories WHERE code = ?;", (code,))
    return row is not None


async def insert_category(
    conn: aiosqlite.Connection, code: str, name: str, descr: Optional[str], now: str
) -> models.Category:
    cur = await conn.execute(
        """
        INSERT INTO categories(code, name, descr, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?);
        """,
        (code, name, descr, now, now),
    )
    cat_id = cur.lastrowid
    await cur.close()
    return await get_category(conn, cat_id)


async def get_category(
    conn: aiosqlite.Connection, cat_id: int
) -> Optional[models.Category]:
    row = await _fetchone(
        conn,
        "SELECT cat_id, code, name, descr, created_at, updated_at FROM categories WHERE cat_id = ?;",
        (cat_id,),
    )
    return _row_to_category(row) if row else None


async def list_categories(conn: aiosqlite.Connection) -> List[models.Category]:
    rows = await _fetchall(
        conn,
        "SELECT cat_id, code, name, descr, created_at, updated_at FROM categories ORDER BY cat_id;",
    )
    return [_row_to_category(r) for r in rows]


async def update_category(
    conn: aiosqlite.Connection, cat_id: int, name: str, descr: Optional[str], now: str
) -> bool:
    """Overwrite name and description. Return True if a row was updated."""
    cur = await conn.execute(
        "UPDATE categories SET name = ?, descr = ?, updated_at = ? WHERE cat_id = ?;",
        (name, descr, now, cat_id),
    )
    updated = cur.rowcount > 0
    await cur.close()
    return updated


async def delete_category(conn: aiosqlite.Connection, cat_id: int) -> bool:
    cur = await conn.execute("DELETE FROM categories WHERE cat_id = ?;", (cat_id,))
    deleted = cur.rowcount > 0
    await cur.close()
    return deleted


# ---------------------------
# Products
# ---------------------------


async def insert_product(
    conn: aiosqlite.Connection,
    name: str,
    descr: Optional[str],
    price: Decimal,
    stock: int,
    cat_id: Optional[int],
    image_urls: List[str],
    now: str,
) -> models.Product:
    cur = await conn.execute(
        """
        INSERT INTO products(name, descr, price, stock, cat_id, image_urls, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?);
        """,
        (name, descr, str(price), stock, cat_id, dump_urls(image_urls), now, now),
    )
    pid = cur.lastrowid
    await cur.close()
    return await get_product(conn, pid)


async def get_product(conn: aiosqlite.Connection, pid: int) -> Optional[models.Product]:
    """Fetch a product by pid."""
    if not fits_sqlite_int(pid):
        return None
    row = await _fetchone(
        conn, f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE pid = ?;", (pid,)
    )
    return _row_to_product(row) if row else None


async def list_products(
    conn: aiosqlite.Connection, cat_id: Optional[int] = None
) -> List[models.Product]:
    if cat_id is None:
        rows = await _fetchall(
            conn, f"SELECT {_PRODUCT_COLUMNS} FROM products ORDER BY pid;"
        )
    else:
        rows = await _fetchall(
            conn,
            f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE cat_id = ? ORDER BY pid;",
            (cat_id,),
        )
    return [_row_to_product(r) for r in rows]


async def update_product(
    conn: aiosqlite.Connection,
    pid: int,
    now: str,
    name: Optional[str] = None,
    descr: Optional[str] = None,
    price: Optional[Decimal] = None,
    stock: Optional[int] = None,
    cat_id: Optional[int] = None,
    image_urls: Optional[List[str]] = None,
) -> bool:
    """
    Update only the provided fields. Return True if a row was updated.
    """
    fields = {
        "name": name,
        "descr": descr,
        "price": str(price) if price is not None else None,
        "stock": stock,
        "cat_id": cat_id,
        "image_urls": dump_urls(image_urls) if image_urls is not None else None,
    }
    changes = {k: v for k, v in fields.items() if v is not None}
    if not changes:
        return False
    assignments = ", ".join(f"{column} = ?" for column in changes)
    cur = await conn.execute(
        f"UPDATE products SET {assignments}, updated_at = ? WHERE pid = ?;",
        (*changes.values(), now, pid),
    )
    updated = cur.rowcount > 0
    await cur.close()
    return updated


async def product_has_orders(conn: aiosqlite.Connection, pid: int) -> bool:
    row = await _fetchone(conn, "SELECT 1 FROM orders WHERE pid = ? LIMIT 1;", (pid,))
    return row is not None


async def delete_product(conn: aiosqlite.Connection, pid: int) -> bool:
    """Delete a product; its cart rows go with it. Return True if a row was removed."""
    cur = await conn.execute("DELETE FROM products WHERE pid = ?;", (pid,))
    deleted = cur.rowcount > 0
    await cur.close()
    return deleted


# ---------------------------
# Stock
# ---------------------------


async def product_stock(conn: aiosqlite.Connection, pid: int) -> Optional[int]:
    if not fits_sqlite_int(pid):
        return None
    row = await _fetchone(conn, "SELECT stock FROM products WHERE pid = ?;", (pid,))
    return int(row[0]) if row else None


async def decrement_stock_if_available(
    conn: aiosqlite.Connection, pid: int, qty: int
) -> bool:
    """
    Atomically take qty units from the product's stock.
    Returns False, changing nothing, if the product is missing or has fewer than qty units.
    """
    if not (fits_sqlite_int(pid) and fits_sqlite_int(qty)):
        return False
    cur = await conn.execute(
        "UPDATE products SET stock = stock - ? WHERE pid = ? AND stock >= ?;",
        (qty, pid, qty),
    )
    updated = cur.rowcount > 0
    await cur.close()
    return updated


async def increment_stock(conn: aiosqlite.Connection, pid: int, qty: int) -> bool:
    if not fits_sqlite_int(pid):
        return False
    cur = await conn.execute(
        "UPDATE products SET stock = stock + ? WHERE pid = ?;", (qty, pid)
    )
    updated = cur.rowcount > 0
    await cur.close()
    return updated


# ---------------------------
# Cart
# ---------------------------


async def get_cart_item(
    conn: aiosqlite.Connection, uid: int, pid: int
) -> Optional[models.CartItem]:
    """The cart row for (uid, pid), if any."""
    row = await _fetchone(
        conn,
        """
        SELECT cart_id, uid, pid, qty, price, created_at, updated_at
        FROM cart
        WHERE uid = ? AND pid = ?;
        """,
        (uid, pid),
    )
    return _row_to_cart_item(row) if row else None


async def get_cart_item_by_id(
    conn: aiosqlite.Connection, uid: int, cart_id: int
) -> Optional[models.CartItem]:
    """The cart row with cart_id, only if it belongs to uid."""
    row = await _fetchone(
        conn,
        """
        SELECT cart_id, uid, pid, qty, price, created_at, updated_at
        FROM cart
        WHERE cart_id = ? AND uid = ?;
        """,
        (cart_id, uid),
    )
    return _row_to_cart_item(row) if row else None


async def insert_cart_item(
    conn: aiosqlite.Connection, uid: int, pid: int, qty: int, price: Decimal, now: str
) -> models.CartItem:
    cur = await conn.execute(
        """
        INSERT INTO cart(uid, pid, qty, price, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?);
        """,
        (uid, pid, qty, str(price), now, now),
    )
    cart_id = cur.lastrowid
    await cur.close()
    return await get_cart_item_by_id(conn, uid, cart_id)


async def update_cart_item(
    conn: aiosqlite.Connection, cart_id: int, qty: int, price: Decimal, now: str
) -> Optional[models.CartItem]:
    await conn.execute(
        "UPDATE cart SET qty = ?, price = ?, updated_at = ? WHERE cart_id = ?;",
        (qty, str(price), now, cart_id),
    )
    row = await _fetchone(
        conn,
        "SELECT cart_id, uid, pid, qty, price, created_at, updated_at FROM cart WHERE cart_id = ?;",
        (cart_id,),
    )
    return _row_to_cart_item(row) if row else None


async def delete_cart_item(conn: aiosqlite.Connection, uid: int, cart_id: int) -> bool:
    """Delete a cart row scoped to its owner. Return True if a row was removed."""
    cur = await conn.execute(
        "DELETE FROM cart WHERE cart_id = ? AND uid = ?;", (cart_id, uid)
    )
    deleted = cur.rowcount > 0
    await cur.close()
    return deleted


async def clear_cart(conn: aiosqlite.Connection, uid: int) -> int:
    """Remove all items from the user's cart; returns how many rows went."""
    cur = await conn.execute("DELETE FROM cart WHERE uid = ?;", (uid,))
    removed = cur.rowcount
    await cur.close()
    return removed


async def list_cart(conn: aiosqlite.Connection, uid: int) -> List[models.CartLine]:
    """Return the user's cart rows joined with product display fields."""
    rows = await _fetchall(
        conn,
        """
        SELECT c.cart_id, c.uid, c.pid, c.qty, c.price, c.created_at, c.updated_at,
               p.name AS product_name, p.price AS product_price,
               p.stock AS product_stock, p.image_urls AS product_image_urls
        FROM cart c
        JOIN products p ON p.pid = c.pid
        WHERE c.uid = ?
        ORDER BY c.cart_id;
        """,
        (uid,),
    )
    return [
        models.CartLine(
            item=_row_to_cart_item(row),
            product_name=row["product_name"],
            product_price=Decimal(row["product_price"]),
            product_stock=int(row["product_stock"]),
            product_image_urls=tuple(load_urls(row["product_image_urls"])),
        )
        for row in rows
    ]


# ---------------------------
# Orders
# ---------------------------


async def insert_order(
    conn: aiosqlite.Connection,
    uid: int,
    pid: int,
    qty: int,
    total_amount: Decimal,
    shipping: models.ShippingDetails,
    now: str,
) -> models.Order:
    cur = await conn.execute(
        """
        INSERT INTO orders(uid, pid, qty, total_amount, status, address, city, zipcode,
                           delivery_date, courier_name, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
        """,
        (
            uid,
            pid,
            qty,
            str(total_amount),
            models.OrderStatus.PENDING.value,
            shipping.address,
            shipping.city,
            shipping.zipcode,
            shipping.delivery_date.isoformat(),
            shipping.courier_name,
            now,
            now,
        ),
    )
    ono = cur.lastrowid
    await cur.close()
    return await get_order(conn, uid, ono)


async def get_order(
    conn: aiosqlite.Connection, uid: int, ono: int
) -> Optional[models.Order]:
    """The order with ono, only if it belongs to uid."""
    row = await _fetchone(
        conn,
        f"SELECT {_ORDER_COLUMNS} FROM orders WHERE ono = ? AND uid = ?;",
        (ono, uid),
    )
    return _row_to_order(row) if row else None


async def set_order_status(
    conn: aiosqlite.Connection, ono: int, status: models.OrderStatus, now: str
) -> bool:
    cur = await conn.execute(
        "UPDATE orders SET status = ?, updated_at = ? WHERE ono = ?;",
        (status.value, now, ono),
    )
    updated = cur.rowcount > 0
    await cur.close()
    return updated


_ORDER_VIEW_SELECT = """
    SELECT o.ono, u.email, p.name AS product_name, o.qty, o.total_amount, o.status,
           o.address, o.city, o.zipcode, o.delivery_date, o.courier_name, o.created_at
    FROM orders o
    JOIN users u ON u.uid = o.uid
    JOIN products p ON p.pid = o.pid
"""


async def list_order_views(
    conn: aiosqlite.Connection, uid: Optional[int] = None
) -> List[models.OrderView]:
    """
    Orders flattened with owner email and product name, oldest first.
    With uid, only that user's orders.
    """
    if uid is None:
        rows = await _fetchall(conn, _ORDER_VIEW_SELECT + " ORDER BY o.ono;")
    else:
        rows = await _fetchall(
            conn, _ORDER_VIEW_SELECT + " WHERE o.uid = ? ORDER BY o.ono;", (uid,)
        )
    return [_row_to_order_view(r) for r in rows]


async def get_order_view(
    conn: aiosqlite.Connection, uid: int, ono: int
) -> Optional[models.OrderView]:
    row = await _fetchone(
        conn, _ORDER_VIEW_SELECT + " WHERE o.ono = ? AND o.uid = ?;", (ono, uid)
    )
    return _row_to_order_view(row) if row else None
