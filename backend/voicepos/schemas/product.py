from decimal import Decimal
from typing import Optional

from voicepos.schemas.base import CamelModel, DbInt, Money, UtcDateTime


class ProductCreate(CamelModel):
    # Range checks live in the catalog service so they surface as 400s
    name: str
    price: Decimal
    stock: DbInt
    category: Optional[str] = None
    barcode: Optional[str] = None
    low_stock_threshold: Optional[DbInt] = None


class ProductUpdate(CamelModel):
    """Partial update. Only fields present in the body are applied."""
    name: Optional[str] = None
    price: Optional[Decimal] = None
    stock: Optional[DbInt] = None
    category: Optional[str] = None
    barcode: Optional[str] = None
    low_stock_threshold: Optional[DbInt] = None


class ProductOut(CamelModel):
    id: int
    name: str
    price: Money
    stock: int
    category: Optional[str] = None
    barcode: Optional[str] = None
    low_stock_threshold: int
    is_low_stock: bool
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None


class ProductDeleted(CamelModel):
    message: str
    id: int
