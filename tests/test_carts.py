import asyncio
from decimal import Decimal

from db import crud
from db import database as db_database
from dbcase import ALICE, BOB, COOKBOOK, KEYBOARD, LAMP, MOUSE, DatabaseTestCase
from services import carts
from utils.errors import (
    CartItemNotFound,
    InsufficientStockError,
    ProductNotFound,
    UserNotFound,
    ValidationError,
)


class CartTestCase(DatabaseTestCase):
    async def test_add_item_accumulates_quantity_and_price(self):
        first = await carts.add_item(ALICE, KEYBOARD, 2)
        self.assertEqual((first.qty, first.price), (2, Decimal("200.00")))

        second = await carts.add_item(ALICE, KEYBOARD, 3)
        self.assertEqual(second.cart_id, first.cart_id)
        self.assertEqual((second.qty, second.price), (5, Decimal("500.00")))

        lines = await carts.list_items(ALICE)
        self.assertEqual(len(lines), 1)

    async def test_concurrent_adds_merge_into_one_row(self):
        await asyncio.gather(
            carts.add_item(ALICE, KEYBOARD, 2), carts.add_item(ALICE, KEYBOARD, 3)
        )
        lines = await carts.list_items(ALICE)
        self.assertEqual(len(lines), 1)
        self.assertEqual((lines[0].item.qty, lines[0].item.price), (5, Decimal("500.00")))

    async def test_add_item_quantity_beyond_integer_range(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            await carts.add_item(ALICE, KEYBOARD, 10**20)
        self.assertEqual(ctx.exception.available, 10)
        with self.assertRaises(ProductNotFound):
            await carts.add_item(ALICE, 10**20, 1)
        self.assertEqual(await carts.list_items(ALICE), [])

    async def test_add_item_keeps_price_from_earlier_adds(self):
        await carts.add_item(ALICE, KEYBOARD, 1)
        async with db_database.connect() as conn:
            await crud.update_product(conn, KEYBOARD, "2025-11-01T00:00:00", price=Decimal("120.00"))
        item = await carts.add_item(ALICE, KEYBOARD, 1)
        self.assertEqual((item.qty, item.price), (2, Decimal("220.00")))

    async def test_update_quantity_recomputes_price(self):
        await carts.add_item(ALICE, KEYBOARD, 2)
        await carts.add_item(ALICE, KEYBOARD, 3)
        item = await carts.update_quantity(ALICE, KEYBOARD, 2)
        self.assertEqual((item.qty, item.price), (2, Decimal("200.00")))

    async def test_update_quantity_uses_current_unit_price(self):
        await carts.add_item(ALICE, KEYBOARD, 2)
        async with db_database.connect() as conn:
            await crud.update_product(conn, KEYBOARD, "2025-11-01T00:00:00", price=Decimal("90.00"))
        item = await carts.update_quantity(ALICE, KEYBOARD, 3)
        self.assertEqual(item.price, Decimal("270.00"))

    async def test_add_item_checks_but_never_takes_stock(self):
        await carts.add_item(ALICE, MOUSE, 3)
        self.assertEqual(await self.stock_of(MOUSE), 3)
        with self.assertRaises(InsufficientStockError) as ctx:
            await carts.add_item(ALICE, MOUSE, 4)
        self.assertEqual(ctx.exception.message, "Only 3 items left in stock")
        with self.assertRaises(InsufficientStockError):
            await carts.add_item(BOB, LAMP, 1)

    async def test_update_quantity_errors(self):
        with self.assertRaises(CartItemNotFound):
            await carts.update_quantity(ALICE, COOKBOOK, 1)
        with self.assertRaises(ProductNotFound):
            await carts.update_quantity(ALICE, 999999, 1)
        with self.assertRaises(UserNotFound):
            await carts.update_quantity("ghost@example.com", KEYBOARD, 1)

        await carts.add_item(ALICE, MOUSE, 1)
        with self.assertRaises(InsufficientStockError):
            await carts.update_quantity(ALICE, MOUSE, 4)
        item = (await carts.list_items(ALICE))[0].item
        self.assertEqual(item.qty, 1)

    async def test_validation_happens_first(self):
        with self.assertRaises(ValidationError):
            await carts.add_item("", KEYBOARD, 1)
        with self.assertRaises(ValidationError):
            await carts.add_item(ALICE, KEYBOARD, 0)
        with self.assertRaises(ValidationError):
            await carts.update_quantity(ALICE, None, 1)

    async def test_add_item_unknown_user_or_product(self):
        with self.assertRaises(UserNotFound):
            await carts.add_item("ghost@example.com", KEYBOARD, 1)
        with self.assertRaises(ProductNotFound):
            await carts.add_item(ALICE, 999999, 1)

    async def test_remove_item_is_scoped_to_owner(self):
        item = await carts.add_item(ALICE, KEYBOARD, 1)
        with self.assertRaises(CartItemNotFound):
            await carts.remove_item(BOB, item.cart_id)
        await carts.remove_item(ALICE, item.cart_id)
        with self.assertRaises(CartItemNotFound):
            await carts.remove_item(ALICE, item.cart_id)
        self.assertEqual(await carts.list_items(ALICE), [])

    async def test_list_items_empty_and_joined(self):
        self.assertEqual(await carts.list_items(BOB), [])
        with self.assertRaises(UserNotFound):
            await carts.list_items("ghost@example.com")

        await carts.add_item(BOB, KEYBOARD, 1)
        await carts.add_item(BOB, COOKBOOK, 2)
        lines = await carts.list_items(BOB)
        self.assertEqual([line.item.pid for line in lines], [KEYBOARD, COOKBOOK])
        self.assertEqual(lines[1].product_name, "Python Cookbook")
        self.assertEqual(lines[1].item.price, Decimal("91.98"))
        self.assertEqual(lines[0].product_image_urls, ("https://img.example.com/keyboard.jpg",))

    async def test_clear(self):
        await carts.add_item(BOB, KEYBOARD, 1)
        await carts.add_item(BOB, COOKBOOK, 2)
        self.assertEqual(await carts.clear(BOB), 2)
        self.assertEqual(await carts.list_items(BOB), [])
