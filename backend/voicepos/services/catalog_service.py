"""Product catalog: owner-scoped CRUD, name search and low-stock queries."""
import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from voicepos.core.config import settings
from voicepos.core.exceptions import DuplicateBarcode, DuplicateName, InvalidInput, NotFound
from voicepos.db.base import MAX_DB_INT
from voicepos.models.product import Product
from voicepos.services.invoice_service import MAX_MONEY

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "price", "stock", "low_stock_threshold")
UPDATABLE_FIELDS = REQUIRED_FIELDS + ("category", "barcode")


def normalize_name(name: Optional[str]) -> str:
    if name is None or not str(name).strip():
        raise InvalidInput("Product name cannot be empty")
    return " ".join(str(name).split()).lower()


def _clean_price(price) -> Decimal:
    try:
        value = Decimal(str(price))
    except (InvalidOperation, ValueError):
        raise InvalidInput("Price must be a number")
    if not value.is_finite():
        raise InvalidInput("Price must be a number")
    if value < 0:
        raise InvalidInput("Price cannot be negative")
    if value > MAX_MONEY:
        raise InvalidInput("Price is too large")
    return value


def _clean_count(value, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{label} must be a whole number")
    if value < 0:
        raise InvalidInput(f"{label} cannot be negative")
    if value > MAX_DB_INT:
        raise InvalidInput(f"{label} is too large")
    return value


def _clean_barcode(barcode: Optional[str]) -> Optional[str]:
    if barcode is None:
        return None
    barcode = str(barcode).strip()
    return barcode or None


def _clean_category(category: Optional[str]) -> Optional[str]:
    if category is None:
        return None
    category = str(category).strip()
    return category or None


def _ensure_unique(db: Session, owner_id: int, name: str, barcode: Optional[str], exclude_id: Optional[int] = None):
    q = db.query(Product).filter(Product.owner_id == owner_id, func.lower(Product.name) == name)
    if exclude_id is not None:
        q = q.filter(Product.id != exclude_id)
    if q.first():
        raise DuplicateName(name)

    if barcode:
        q = db.query(Product).filter(Product.owner_id == owner_id, Product.barcode == barcode)
        if exclude_id is not None:
            q = q.filter(Product.id != exclude_id)
        if q.first():
            raise DuplicateBarcode(barcode)


def get_product(db: Session, owner_id: int, product_id: int) -> Product:
    if abs(product_id) > MAX_DB_INT:
        raise NotFound("Product not found")
    product = db.query(Product).filter(
        Product.id == product_id,
        Product.owner_id == owner_id,
    ).first()
    if not product:
        raise NotFound("Product not found")
    return product


def list_products(db: Session, owner_id: int) -> List[Product]:
    return (
        db.query(Product)
        .filter(Product.owner_id == owner_id)
        .order_by(Product.name.asc())
        .all()
    )


def list_low_stock(db: Session, owner_id: int) -> List[Product]:
    """Products at or below their own threshold, emptiest first."""
    return (
        db.query(Product)
        .filter(
            Product.owner_id == owner_id,
            Product.stock <= Product.low_stock_threshold,
        )
        .order_by(Product.stock.asc(), Product.id.asc())
        .all()
    )


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def find_by_name(db: Session, owner_id: int, query: str, limit: Optional[int] = None) -> List[Product]:
    """Case-insensitive substring match on name, in insertion order."""
    limit = settings.SEARCH_RESULT_LIMIT if limit is None else limit
    pattern = f"%{_escape_like((query or '').strip().lower())}%"
    return (
        db.query(Product)
        .filter(
            Product.owner_id == owner_id,
            func.lower(Product.name).like(pattern, escape="\\"),
        )
        .order_by(Product.id.asc())
        .limit(limit)
        .all()
    )


def create_product(
    db: Session,
    owner_id: int,
    *,
    name: str,
    price,
    stock: int,
    category: Optional[str] = None,
    barcode: Optional[str] = None,
    low_stock_threshold: Optional[int] = None,
) -> Product:
    name = normalize_name(name)
    price = _clean_price(price)
    stock = _clean_count(stock, "Stock")
    if low_stock_threshold is None:
        low_stock_threshold = settings.DEFAULT_LOW_STOCK_THRESHOLD
    low_stock_threshold = _clean_count(low_stock_threshold, "Low stock threshold")
    barcode = _clean_barcode(barcode)

    _ensure_unique(db, owner_id, name, barcode)

    product = Product(
        owner_id=owner_id,
        name=name,
        price=price,
        stock=stock,
        category=_clean_category(category),
        barcode=barcode,
        low_stock_threshold=low_stock_threshold,
    )
    db.add(product)
    db.commit()
    db.refresh(product)

    logger.info(f"[Catalog] owner={owner_id} created product {product.id} '{product.name}' stock={product.stock}")
    return product


def update_product(db: Session, owner_id: int, product_id: int, changes: dict) -> Product:
    """Apply only the supplied fields. Explicit None clears category/barcode."""
    product = get_product(db, owner_id, product_id)

    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise InvalidInput(f"Unknown fields: {', '.join(sorted(unknown))}")
    for field in REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            raise InvalidInput(f"{field} cannot be null")

    name = normalize_name(changes["name"]) if "name" in changes else product.name
    barcode = _clean_barcode(changes["barcode"]) if "barcode" in changes else product.barcode
    _ensure_unique(db, owner_id, name, barcode, exclude_id=product.id)

    values = {"name": name, "barcode": barcode}
    if "price" in changes:
        values["price"] = _clean_price(changes["price"])
    if "stock" in changes:
        values["stock"] = _clean_count(changes["stock"], "Stock")
    if "low_stock_threshold" in changes:
        values["low_stock_threshold"] = _clean_count(changes["low_stock_threshold"], "Low stock threshold")
    if "category" in changes:
        values["category"] = _clean_category(changes["category"])

    for field, value in values.items():
        setattr(product, field, value)
    db.commit()
    db.refresh(product)

    logger.info(f"[Catalog] owner={owner_id} updated product {product.id}: {sorted(changes)}")
    return product


def delete_product(db: Session, owner_id: int, product_id: int) -> str:
    """Hard delete. Sales keep their captured name and price."""
    product = get_product(db, owner_id, product_id)
    name = product.name
    db.delete(product)
    db.commit()

    logger.info(f"[Catalog] owner={owner_id} deleted product {product_id} '{name}'")
    return name
