import asyncio
from datetime import date
from decimal import Decimal

from db import models
from dbcase import ALICE, KEYBOARD, MOUSE, DatabaseTestCase
from services import carts, catalog, orders
from utils.errors import (
    CategoryNotFound,
    ConflictError,
    NotFoundError,
    ProductNotFound,
    ValidationError,
)

SHIPPING = models.ShippingDetails(
    address="1 Main St",
    city="Springfield",
    zipcode="62701",
    delivery_date=date(2025, 12, 1),
    courier_name="DHL",
)


class CategoryTestCase(DatabaseTestCase):
    async def test_create_category_uses_next_code(self):
        category = await catalog.create_category("Toys", "Things to play with")
        self.assertEqual(category.code, "C004")
        category = await catalog.create_category("Garden")
        self.assertEqual(category.code, "C005")

    async def test_concurrent_creations_get_distinct_codes(self):
        created = await asyncio.gather(
            *(catalog.create_category(f"Category {i}") for i in range(5))
        )
        codes = sorted(c.code for c in created)
        self.assertEqual(codes, ["C004", "C005", "C006", "C007", "C008"])

    async def test_code_follows_latest_after_delete(self):
        toys = await catalog.create_category("Toys")
        await catalog.delete_category(toys.cat_id)
        self.assertEqual((await catalog.create_category("Games")).code, "C004")

    async def test_get_update_delete(self):
        self.assertEqual((await catalog.get_category(1)).code, "C001")
        with self.assertRaises(CategoryNotFound):
            await catalog.get_category(999)

        updated = await catalog.update_category(2, "Novels", "Fiction only")
        self.assertEqual((updated.code, updated.name), ("C002", "Novels"))
        with self.assertRaises(ValidationError):
            await catalog.update_category(2, "Novels", "")
        with self.assertRaises(CategoryNotFound):
            await catalog.update_category(999, "x", "y")

        await catalog.delete_category(3)
        with self.assertRaises(CategoryNotFound):
            await catalog.delete_category(3)
        # products of a deleted category stay, uncategorised
        self.assertIsNone((await catalog.get_product(3)).cat_id)

    async def test_list_categories_empty(self):
        for category in await catalog.list_categories():
            await catalog.delete_category(category.cat_id)
        with self.assertRaises(NotFoundError) as ctx:
            await catalog.list_categories()
        self.assertEqual(ctx.exception.message, "No categories found")

    async def test_blank_name_rejected(self):
        with self.assertRaises(ValidationError):
            await catalog.create_category("   ")


class ProductTestCase(DatabaseTestCase):
    async def test_create_and_get(self):
        product = await catalog.create_product(
            "USB Hub", "4.5", 12, cat_id=1, image_urls=["hub.jpg"]
        )
        self.assertEqual(product.price, Decimal("4.50"))
        self.assertEqual(product.image_urls, ("hub.jpg",))
        self.assertEqual(await catalog.get_product(product.pid), product)
        with self.assertRaises(ProductNotFound):
            await catalog.get_product(999999)

    async def test_create_validation(self):
        with self.assertRaises(ValidationError):
            await catalog.create_product("Hub", Decimal("-1"), 1)
        with self.assertRaises(ValidationError):
            await catalog.create_product("Hub", Decimal("1"), -1)
        with self.assertRaises(ValidationError):
            await catalog.create_product("Hub", "abc", 1)
        with self.assertRaises(CategoryNotFound):
            await catalog.create_product("Hub", Decimal("1"), 1, cat_id=999)

    async def test_update_partial(self):
        product = await catalog.update_product(MOUSE, stock=8)
        self.assertEqual((product.stock, product.price), (8, Decimal("25.50")))
        product = await catalog.update_product(MOUSE, price=30, name="Silent Mouse")
        self.assertEqual((product.name, product.price), ("Silent Mouse", Decimal("30.00")))
        with self.assertRaises(ProductNotFound):
            await catalog.update_product(999999, stock=1)
        with self.assertRaises(ValidationError):
            await catalog.update_product(KEYBOARD, stock=-5)

    async def test_list_by_category(self):
        self.assertEqual(len(await catalog.list_products()), 4)
        self.assertEqual([p.pid for p in await catalog.list_products(1)], [KEYBOARD, MOUSE])
        self.assertEqual(await catalog.list_products(999), [])

    async def test_delete_product_takes_cart_rows_with_it(self):
        await carts.add_item(ALICE, MOUSE, 2)
        await catalog.delete_product(MOUSE)
        with self.assertRaises(ProductNotFound):
            await catalog.get_product(MOUSE)
        self.assertEqual(await carts.list_items(ALICE), [])
        with self.assertRaises(ProductNotFound):
            await catalog.delete_product(MOUSE)

    async def test_ordered_product_cannot_be_deleted(self):
        await orders.place_order(ALICE, KEYBOARD, 1, SHIPPING)
        with self.assertRaises(ConflictError) as ctx:
            await catalog.delete_product(KEYBOARD)
        self.assertEqual(ctx.exception.message, "Product has orders and cannot be deleted")
        self.assertEqual((await catalog.get_product(KEYBOARD)).stock, 9)
