import unittest
from decimal import Decimal
from types import SimpleNamespace

from voicepos.core.exceptions import InvalidInput
from voicepos.services.cart import Cart, CartLine


def product(id, name, price):
    return SimpleNamespace(id=id, name=name, price=Decimal(price))


class CartTest(unittest.TestCase):
    def setUp(self):
        self.milk = product(1, "milk", "10.00")
        self.bread = product(2, "bread", "12.50")

    def test_add_merges_repeated_products(self):
        cart = Cart()
        cart.add(self.milk)
        cart.add(self.bread, 2)
        cart.add(self.milk, 2)

        self.assertEqual(len(cart), 2)
        self.assertEqual([line.product_id for line in cart.lines], [1, 2])
        self.assertEqual(cart.lines[0].quantity, 3)
        self.assertEqual(cart.item_count, 5)
        self.assertEqual(cart.subtotal, Decimal("55.00"))

    def test_update_quantity_below_one_removes_line(self):
        cart = Cart()
        cart.add(self.milk, 2)
        cart.update_quantity(1, 4)
        self.assertEqual(cart.lines[0].line_total, Decimal("40.00"))

        cart.update_quantity(1, 0)
        self.assertNotIn(1, cart)
        self.assertEqual(cart.subtotal, Decimal("0.00"))

    def test_remove_and_clear(self):
        cart = Cart()
        cart.add(self.milk)
        cart.add(self.bread)
        cart.remove(1)
        self.assertEqual(cart.checkout_items(), [(2, 1)])
        cart.remove(99)
        cart.clear()
        self.assertEqual(len(cart), 0)

    def test_tax_and_total(self):
        cart = Cart()
        cart.add(self.bread, 3)  # 37.50
        self.assertEqual(cart.tax(10), Decimal("3.75"))
        self.assertEqual(cart.total(10), Decimal("41.25"))
        self.assertEqual(cart.total(), Decimal("37.50"))

    def test_tax_rounds_half_up_to_cents(self):
        cart = Cart()
        cart.add(product(3, "gum", "0.25"))
        # 0.25 * 2.5% = 0.00625
        self.assertEqual(cart.tax(Decimal("2.5")), Decimal("0.01"))

    def test_rebuild_from_client_lines(self):
        cart = Cart([
            CartLine(product_id=1, name="milk", unit_price=Decimal("10"), quantity=1),
            CartLine(product_id=1, name="milk", unit_price=Decimal("10"), quantity=2),
        ])
        self.assertEqual(cart.checkout_items(), [(1, 3)])

    def test_rejects_non_positive_quantity(self):
        with self.assertRaises(InvalidInput):
            Cart().add(self.milk, 0)

    def test_summary(self):
        cart = Cart()
        cart.add(self.milk, 2)
        summary = cart.summary(Decimal("5"))
        self.assertEqual(summary["item_count"], 2)
        self.assertEqual(summary["subtotal"], Decimal("20.00"))
        self.assertEqual(summary["tax"], Decimal("1.00"))
        self.assertEqual(summary["total"], Decimal("21.00"))
        self.assertEqual(summary["items"][0].name, "milk")


if __name__ == "__main__":
    unittest.main()
