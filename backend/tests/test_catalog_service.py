import unittest
from decimal import Decimal

from tests.support import DatabaseTestCase, make_user
from voicepos.core.exceptions import DuplicateBarcode, DuplicateName, InvalidInput, NotFound
from voicepos.models.product import Product
from voicepos.services import catalog_service


class CatalogServiceTest(DatabaseTestCase, unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.owner = make_user(self.db)
        self.other = make_user(self.db, email="other@cornershop.com")

    def create(self, name="Milk", price="10.00", stock=5, owner=None, **extra):
        owner = owner or self.owner
        return catalog_service.create_product(self.db, owner.id, name=name, price=price, stock=stock, **extra)

    def test_create_normalizes_name_and_defaults_threshold(self):
        product = self.create(name="  Coca   COLA ")
        self.assertEqual(product.name, "coca cola")
        self.assertEqual(product.low_stock_threshold, 5)
        self.assertEqual(product.price, Decimal("10.00"))

    def test_duplicate_name_is_case_insensitive_per_owner(self):
        self.create(name="Milk")
        with self.assertRaises(DuplicateName):
            self.create(name="MILK")
        # Another owner may use the same name
        self.assertEqual(self.create(name="milk", owner=self.other).name, "milk")

    def test_duplicate_barcode(self):
        self.create(name="milk", barcode="600100")
        with self.assertRaises(DuplicateBarcode):
            self.create(name="bread", barcode=" 600100 ")

    def test_blank_barcode_is_absent(self):
        first = self.create(name="milk", barcode="  ")
        second = self.create(name="bread", barcode="")
        self.assertIsNone(first.barcode)
        self.assertIsNone(second.barcode)

    def test_rejects_negative_and_empty_values(self):
        with self.assertRaises(InvalidInput):
            self.create(price="-1")
        with self.assertRaises(InvalidInput):
            self.create(stock=-1)
        with self.assertRaises(InvalidInput):
            self.create(low_stock_threshold=-2)
        with self.assertRaises(InvalidInput):
            self.create(name="   ")
        with self.assertRaises(InvalidInput):
            self.create(price="abc")
        self.assertEqual(self.db.query(Product).count(), 0)

    def test_rejects_values_too_large_for_their_columns(self):
        with self.assertRaises(InvalidInput):
            self.create(stock=10**30)
        with self.assertRaises(InvalidInput):
            self.create(low_stock_threshold=10**30)
        with self.assertRaises(InvalidInput):
            self.create(price="1e12")
        self.assertEqual(self.db.query(Product).count(), 0)

        with self.assertRaises(NotFound):
            catalog_service.get_product(self.db, self.owner.id, 10**30)

    def test_update_applies_only_supplied_fields(self):
        product = self.create(name="milk", category="Dairy", barcode="111")
        updated = catalog_service.update_product(self.db, self.owner.id, product.id, {"price": "12.00", "name": "Fresh Milk"})
        self.assertEqual(updated.name, "fresh milk")
        self.assertEqual(updated.price, Decimal("12.00"))
        self.assertEqual(updated.stock, 5)
        self.assertEqual(updated.category, "Dairy")
        self.assertEqual(updated.barcode, "111")

    def test_update_null_clears_optional_and_rejects_required(self):
        product = self.create(name="milk", category="Dairy", barcode="111")
        updated = catalog_service.update_product(self.db, self.owner.id, product.id, {"category": None, "barcode": None})
        self.assertIsNone(updated.category)
        self.assertIsNone(updated.barcode)
        with self.assertRaises(InvalidInput):
            catalog_service.update_product(self.db, self.owner.id, product.id, {"price": None})

    def test_update_rename_onto_existing_name(self):
        self.create(name="milk")
        bread = self.create(name="bread")
        with self.assertRaises(DuplicateName):
            catalog_service.update_product(self.db, self.owner.id, bread.id, {"name": "Milk"})
        # Renaming onto itself is fine
        catalog_service.update_product(self.db, self.owner.id, bread.id, {"name": "BREAD"})

    def test_update_and_delete_scope_to_owner(self):
        product = self.create(name="milk")
        with self.assertRaises(NotFound):
            catalog_service.update_product(self.db, self.other.id, product.id, {"stock": 1})
        with self.assertRaises(NotFound):
            catalog_service.delete_product(self.db, self.other.id, product.id)
        with self.assertRaises(NotFound):
            catalog_service.get_product(self.db, self.other.id, product.id)

    def test_delete_is_hard(self):
        product = self.create(name="milk")
        self.assertEqual(catalog_service.delete_product(self.db, self.owner.id, product.id), "milk")
        self.assertEqual(self.db.query(Product).count(), 0)
        with self.assertRaises(NotFound):
            catalog_service.delete_product(self.db, self.owner.id, product.id)

    def test_list_all_ordered_by_name(self):
        for name in ("sugar", "bread", "milk"):
            self.create(name=name)
        self.create(name="apples", owner=self.other)
        names = [p.name for p in catalog_service.list_products(self.db, self.owner.id)]
        self.assertEqual(names, ["bread", "milk", "sugar"])

    def test_low_stock_ordered_by_stock(self):
        self.create(name="milk", stock=4)
        self.create(name="bread", stock=0)
        self.create(name="sugar", stock=50)
        self.create(name="rice", stock=9, low_stock_threshold=10)
        names = [p.name for p in catalog_service.list_low_stock(self.db, self.owner.id)]
        self.assertEqual(names, ["bread", "milk", "rice"])

    def test_find_by_name_substring_and_limit(self):
        for name in ("milk", "milk powder", "soy milk", "bread"):
            self.create(name=name)
        found = catalog_service.find_by_name(self.db, self.owner.id, "MILK")
        self.assertEqual([p.name for p in found], ["milk", "milk powder", "soy milk"])
        self.assertEqual(len(catalog_service.find_by_name(self.db, self.owner.id, "milk", limit=2)), 2)
        self.assertEqual(catalog_service.find_by_name(self.db, self.other.id, "milk"), [])

    def test_find_by_name_escapes_wildcards(self):
        self.create(name="100% juice")
        self.create(name="apple juice")
        found = catalog_service.find_by_name(self.db, self.owner.id, "100%")
        self.assertEqual([p.name for p in found], ["100% juice"])
        self.assertEqual(catalog_service.find_by_name(self.db, self.owner.id, "_"), [])


if __name__ == "__main__":
    unittest.main()
