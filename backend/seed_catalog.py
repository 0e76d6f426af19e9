"""Seed a demo grocery catalog for the first admin account.

Run after the server has started once (tables and the bootstrap admin exist).
Products that are already in the catalog are left untouched.
"""
import logging

from voicepos.core.exceptions import DuplicateName
from voicepos.core.logging import setup_logging
from voicepos.db.init_db import init_db
from voicepos.db.session import SessionLocal
from voicepos.models.user import ROLE_ADMIN, User
from voicepos.services import catalog_service

logger = logging.getLogger("seed_catalog")

DEMO_PRODUCTS = [
    {"name": "Milk", "price": "10.00", "stock": 40, "category": "Dairy", "barcode": "6001001000011"},
    {"name": "Bread", "price": "12.50", "stock": 25, "category": "Bakery", "barcode": "6001001000028"},
    {"name": "Sugar", "price": "18.00", "stock": 30, "category": "Groceries", "barcode": "6001001000035"},
    {"name": "Rice 5kg", "price": "95.00", "stock": 12, "category": "Groceries"},
    {"name": "Coca Cola", "price": "7.00", "stock": 48, "category": "Drinks", "barcode": "5449000000996"},
    {"name": "Bottled Water", "price": "3.50", "stock": 60, "category": "Drinks"},
    {"name": "Eggs (crate)", "price": "65.00", "stock": 4, "category": "Dairy", "low_stock_threshold": 5},
    {"name": "Cooking Oil 1L", "price": "32.00", "stock": 10, "category": "Groceries"},
    {"name": "Tomato Paste", "price": "4.00", "stock": 0, "category": "Groceries"},
    {"name": "Bar Soap", "price": "6.00", "stock": 22, "category": "Household"},
]


def seed_catalog():
    db = SessionLocal()
    try:
        owner = db.query(User).filter(User.role == ROLE_ADMIN).order_by(User.id).first()
        if not owner:
            logger.error("No admin user found. Start the server once to create one.")
            return

        created = 0
        for item in DEMO_PRODUCTS:
            try:
                catalog_service.create_product(db, owner.id, **item)
                created += 1
            except DuplicateName:
                logger.info(f"Skipping existing product: {item['name']}")

        total = len(catalog_service.list_products(db, owner.id))
        logger.info(f"Seeded {created} product(s) for {owner.email}; catalog now has {total}")
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    init_db()
    seed_catalog()
