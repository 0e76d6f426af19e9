from sqlalchemy import Column, Integer, String

from voicepos.db.base import Base

SALE_SEQUENCE = "sale"


class InvoiceCounter(Base):
    """Persisted store-wide sequence. Bumped atomically inside each checkout."""

    __tablename__ = "invoice_counters"

    name = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
