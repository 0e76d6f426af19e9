"""
Sale and SaleItem: the immutable financial record written by checkout.

Rows are inserted once and never changed; the ORM hooks below refuse updates
and deletes so a stray session.commit() cannot rewrite history.
"""
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, event
from sqlalchemy.orm import relationship

from voicepos.db.base import Base

PAYMENT_CASH = "cash"
PAYMENT_CARD = "card"
PAYMENT_MOBILE_MONEY = "mobile_money"
PAYMENT_METHODS = (PAYMENT_CASH, PAYMENT_CARD, PAYMENT_MOBILE_MONEY)


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(32), unique=True, nullable=False, index=True)
    cashier_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    subtotal = Column(Numeric(12, 2), nullable=False)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)  # percent
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(32), nullable=False, default=PAYMENT_CASH)
    amount_paid = Column(Numeric(12, 2), nullable=False, default=0)
    change = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    items = relationship(
        "SaleItem",
        back_populates="sale",
        order_by="SaleItem.line_no",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    cashier = relationship("User", backref="sales")


class SaleItem(Base):
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    line_no = Column(Integer, nullable=False)
    # Plain reference: products may be hard-deleted, history keeps the snapshot
    product_id = Column(Integer, nullable=False, index=True)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    line_total = Column(Numeric(12, 2), nullable=False)

    sale = relationship("Sale", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_sale_items_quantity_positive"),
    )


class ImmutableRecordError(RuntimeError):
    pass


def _refuse_change(mapper, connection, target):
    raise ImmutableRecordError(f"{type(target).__name__} {target.id} is immutable")


for _model in (Sale, SaleItem):
    event.listen(_model, "before_update", _refuse_change)
    event.listen(_model, "before_delete", _refuse_change)
