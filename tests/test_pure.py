import unittest
from decimal import Decimal

from utils.pure import dump_urls, hash_password, line_total, load_urls, next_category_code, to_money


class PureTestCase(unittest.TestCase):
    def test_next_category_code(self):
        self.assertEqual(next_category_code(None), "C001")
        self.assertEqual(next_category_code("C001"), "C002")
        self.assertEqual(next_category_code("C009"), "C010")
        self.assertEqual(next_category_code("C999"), "C1000")

    def test_to_money(self):
        self.assertEqual(to_money("10"), Decimal("10.00"))
        self.assertEqual(to_money(0.1), Decimal("0.10"))
        self.assertEqual(to_money(Decimal("2.005")), Decimal("2.01"))
        with self.assertRaises(ValueError):
            to_money("ten")

    def test_line_total(self):
        self.assertEqual(line_total(Decimal("25.50"), 3), Decimal("76.50"))

    def test_hash_password(self):
        self.assertEqual(
            hash_password("admin123"),
            "240be518fabd2724ddb6f04eeb1da5967448d7e831c08c8fa822809f74c720a9",
        )

    def test_urls(self):
        self.assertEqual(load_urls(dump_urls(("a.jpg", "b.jpg"))), ["a.jpg", "b.jpg"])
        self.assertEqual(load_urls(None), [])
