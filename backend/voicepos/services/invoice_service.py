"""Invoice numbering and tax arithmetic. Used by the checkout processor."""
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from voicepos.models.invoice_counter import SALE_SEQUENCE, InvoiceCounter
from voicepos.models.sale import Sale

CENT = Decimal("0.01")
# Money columns are Numeric(12, 2)
MAX_MONEY = Decimal("9999999999.99")


def to_money(value) -> Decimal:
    """Decimal rounded half-up to cents. Floats go through str() to avoid binary noise."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_tax(subtotal, tax_rate=0) -> dict:
    """Tax breakdown for a sale.

    Args:
        subtotal: Sum of line totals
        tax_rate: Percentage (7.5 means 7.5%), default 0

    Returns:
        dict with subtotal, tax_rate, tax, total where total == subtotal + tax exactly
    """
    base = to_money(subtotal)
    rate = Decimal(str(tax_rate))
    tax = to_money(base * rate / Decimal("100"))
    return {
        "subtotal": base,
        "tax_rate": rate,
        "tax": tax,
        "total": base + tax,
    }


def format_invoice_number(day: date, sequence: int) -> str:
    return f"INV-{day:%y%m%d}-{sequence:04d}"


def ensure_invoice_counter(db: Session, name: str = SALE_SEQUENCE) -> InvoiceCounter:
    """Create the counter row if missing, continuing from any sales already recorded."""
    counter = db.get(InvoiceCounter, name)
    if counter is None:
        existing = db.query(func.count(Sale.id)).scalar() or 0
        counter = InvoiceCounter(name=name, value=existing)
        db.add(counter)
        db.flush()
    return counter


def next_invoice_number(db: Session, day: date) -> str:
    """Reserve the next store-wide sequence value inside the caller's transaction.

    The increment is a single UPDATE, so two concurrent checkouts can never
    read the same value; rolling back the checkout releases it.
    """
    bumped = (
        db.query(InvoiceCounter)
        .filter(InvoiceCounter.name == SALE_SEQUENCE)
        .update({InvoiceCounter.value: InvoiceCounter.value + 1}, synchronize_session=False)
    )
    if not bumped:
        ensure_invoice_counter(db)
        db.query(InvoiceCounter).filter(InvoiceCounter.name == SALE_SEQUENCE).update(
            {InvoiceCounter.value: InvoiceCounter.value + 1}, synchronize_session=False
        )

    sequence = (
        db.query(InvoiceCounter.value)
        .filter(InvoiceCounter.name == SALE_SEQUENCE)
        .scalar()
    )
    return format_invoice_number(day, sequence)
