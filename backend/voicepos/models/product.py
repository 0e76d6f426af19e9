from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from voicepos.db.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Product(Base):
    """
    Catalog entry owned by one operator.

    name is stored lower-cased; (owner, name) and (owner, barcode) are unique.
    stock never goes below zero: checkout decrements it with a conditional
    UPDATE and the check constraint backs that up.
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    category = Column(String(255), nullable=True)
    barcode = Column(String(128), nullable=True)
    low_stock_threshold = Column(Integer, nullable=False, default=5)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    owner = relationship("User", backref="products")

    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_products_owner_name"),
        UniqueConstraint("owner_id", "barcode", name="uq_products_owner_barcode"),
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.low_stock_threshold

    def __repr__(self):
        return f"<Product id={self.id} name={self.name!r} stock={self.stock}>"
