"""
Sale transaction processor and sale history.

A checkout is all-or-nothing: every line's stock decrement, the invoice
sequence bump and the sale insert share one database transaction. Stock is
taken with a conditional UPDATE (stock >= quantity), so two tills selling the
last unit at the same moment cannot both succeed.
"""
import logging
import math
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from voicepos.core.config import settings
from voicepos.core.dates import as_utc, day_bounds, local_today, utc_now
from voicepos.core.exceptions import (
    EmptyCart,
    InsufficientStock,
    InvalidInput,
    POSError,
    ProductNotFound,
    SaleNotFound,
)
from voicepos.db.base import MAX_DB_INT
from voicepos.models.product import Product
from voicepos.models.sale import PAYMENT_CASH, PAYMENT_METHODS, Sale, SaleItem
from voicepos.services.invoice_service import CENT, MAX_MONEY, calculate_tax, next_invoice_number, to_money

logger = logging.getLogger(__name__)

# Sale.tax_rate is Numeric(5, 2)
MAX_TAX_RATE = Decimal("999.99")


def _validate_line(product_id, quantity) -> Tuple[int, int]:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidInput("Quantity must be a whole number of at least 1")
    if quantity > MAX_DB_INT:
        raise InvalidInput("Quantity is too large")
    if isinstance(product_id, bool) or not isinstance(product_id, int) or abs(product_id) > MAX_DB_INT:
        raise ProductNotFound(product_id)
    return product_id, quantity


def _clean_tax_rate(tax_rate) -> Decimal:
    """Percentage with at most two decimals, so the stored Numeric(5, 2) rate reproduces the tax."""
    try:
        rate = Decimal(str(tax_rate if tax_rate is not None else 0))
    except InvalidOperation:
        raise InvalidInput("Tax rate must be a number")
    if not rate.is_finite():
        raise InvalidInput("Tax rate must be a number")
    if rate < 0:
        raise InvalidInput("Tax rate cannot be negative")
    if rate > MAX_TAX_RATE:
        raise InvalidInput(f"Tax rate cannot exceed {MAX_TAX_RATE}")
    if rate != rate.quantize(CENT):
        raise InvalidInput("Tax rate can have at most two decimal places")
    return rate.quantize(CENT)


def _take_stock(db: Session, owner_id: int, product_id: int, quantity: int) -> Product:
    """Decrement stock for one line or raise. Runs inside the checkout transaction."""
    product = db.query(Product).filter(
        Product.id == product_id,
        Product.owner_id == owner_id,
    ).first()
    if product is None:
        raise ProductNotFound(product_id)

    taken = (
        db.query(Product)
        .filter(
            Product.id == product.id,
            Product.owner_id == owner_id,
            Product.stock >= quantity,
        )
        .update({Product.stock: Product.stock - quantity}, synchronize_session=False)
    )
    if not taken:
        # Re-read so earlier lines of this same checkout are reflected
        db.refresh(product)
        raise InsufficientStock(product.name, product.stock)
    return product


def checkout(
    db: Session,
    owner_id: int,
    items: Sequence[Tuple[int, int]],
    payment_method: str = PAYMENT_CASH,
    amount_paid=None,
    tax_rate=0,
    now: Optional[datetime] = None,
) -> Sale:
    """Validate, take stock for and record one sale.

    Args:
        owner_id: Cashier/owner; products outside this scope are "not found"
        items: (product_id, quantity) pairs in the order they were rung up
        payment_method: cash | card | mobile_money
        amount_paid: Tendered amount; None means exact payment
        tax_rate: Percentage applied to the subtotal

    Raises:
        EmptyCart, InvalidInput, ProductNotFound, InsufficientStock.
        On any failure nothing is written: no stock moves and no sale exists.
    """
    if not items:
        raise EmptyCart()
    if payment_method not in PAYMENT_METHODS:
        raise InvalidInput(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}")

    tax_rate = _clean_tax_rate(tax_rate)
    if amount_paid is not None:
        try:
            amount_paid = to_money(amount_paid)
        except InvalidOperation:
            raise InvalidInput("Amount paid must be a number")
        if not amount_paid.is_finite():
            raise InvalidInput("Amount paid must be a number")
        if amount_paid < 0:
            raise InvalidInput("Amount paid cannot be negative")
        if amount_paid > MAX_MONEY:
            raise InvalidInput("Amount paid is too large")

    lines = [_validate_line(product_id, quantity) for product_id, quantity in items]
    now = as_utc(now) if now else utc_now()

    try:
        subtotal = Decimal("0")
        sale_items: List[SaleItem] = []
        for line_no, (product_id, quantity) in enumerate(lines, start=1):
            product = _take_stock(db, owner_id, product_id, quantity)
            unit_price = to_money(product.price)
            line_total = unit_price * quantity
            subtotal += line_total
            sale_items.append(
                SaleItem(
                    line_no=line_no,
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    unit_price=unit_price,
                    line_total=line_total,
                )
            )

        totals = calculate_tax(subtotal, tax_rate)
        if amount_paid is None:
            paid, change = totals["total"], Decimal("0.00")
        else:
            paid, change = amount_paid, amount_paid - totals["total"]

        sale = Sale(
            invoice_number=next_invoice_number(db, local_today(now)),
            cashier_id=owner_id,
            subtotal=totals["subtotal"],
            tax_rate=totals["tax_rate"],
            tax=totals["tax"],
            total=totals["total"],
            payment_method=payment_method,
            amount_paid=paid,
            change=change,
            created_at=now,
            items=sale_items,
        )
        db.add(sale)
        db.commit()
    except POSError as exc:
        db.rollback()
        logger.warning(f"[Checkout] owner={owner_id} rejected: {exc.message}")
        raise
    except Exception:
        db.rollback()
        raise

    db.refresh(sale)
    logger.info(
        f"[Checkout] owner={owner_id} {sale.invoice_number}: "
        f"{len(sale.items)} line(s), total={sale.total} via {sale.payment_method}"
    )
    return sale


def get_sale(db: Session, owner_id: int, sale_id: int) -> Sale:
    if abs(sale_id) > MAX_DB_INT:
        raise SaleNotFound(sale_id)
    sale = db.query(Sale).filter(Sale.id == sale_id, Sale.cashier_id == owner_id).first()
    if not sale:
        raise SaleNotFound(sale_id)
    return sale


def list_sales(
    db: Session,
    owner_id: int,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    page: int = 1,
    limit: Optional[int] = None,
) -> dict:
    """Newest-first sale history with optional [start, end] bounds (UTC)."""
    limit = settings.SALES_PAGE_SIZE if limit is None else limit
    if page < 1:
        raise InvalidInput("page must be at least 1")
    if limit < 1 or limit > settings.MAX_PAGE_SIZE:
        raise InvalidInput(f"limit must be between 1 and {settings.MAX_PAGE_SIZE}")
    if (page - 1) * limit > MAX_DB_INT:
        raise InvalidInput("page is out of range")
    if start and end and start > end:
        raise InvalidInput("startDate must not be after endDate")

    q = db.query(Sale).filter(Sale.cashier_id == owner_id)
    if start:
        q = q.filter(Sale.created_at >= start)
    if end:
        q = q.filter(Sale.created_at <= end)

    total = q.count()
    sales = (
        q.order_by(Sale.created_at.desc(), Sale.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "sales": sales,
        "total_pages": math.ceil(total / limit) if total else 0,
        "current_page": page,
        "total": total,
    }


def todays_sales(db: Session, owner_id: int, now: Optional[datetime] = None) -> dict:
    start, end = day_bounds(now)
    sales = (
        db.query(Sale)
        .filter(
            Sale.cashier_id == owner_id,
            Sale.created_at >= start,
            Sale.created_at < end,
        )
        .order_by(Sale.created_at.asc(), Sale.id.asc())
        .all()
    )
    return {
        "sales": sales,
        "total": sum_totals(sales),
        "count": len(sales),
    }


def sum_totals(sales: Iterable[Sale]) -> Decimal:
    return sum((to_money(s.total) for s in sales), Decimal("0.00"))
