from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from voicepos.models.sale import PAYMENT_CASH
from voicepos.schemas.base import CamelModel, DbInt, Money, UtcDateTime


class CheckoutLine(CamelModel):
    product_id: DbInt
    quantity: DbInt


class CheckoutRequest(CamelModel):
    items: List[CheckoutLine] = Field(default_factory=list)
    payment_method: str = PAYMENT_CASH
    amount_paid: Optional[Decimal] = None
    tax_rate: Decimal = Decimal("0")


class SaleItemOut(CamelModel):
    product_id: int
    product_name: str
    quantity: int
    unit_price: Money
    line_total: Money


class SaleOut(CamelModel):
    id: int
    invoice_number: str
    cashier_id: int
    items: List[SaleItemOut]
    subtotal: Money
    tax_rate: Money
    tax: Money
    total: Money
    payment_method: str
    amount_paid: Money
    change: Money
    created_at: UtcDateTime


class SalePage(CamelModel):
    sales: List[SaleOut]
    total_pages: int
    current_page: int
    total: int


class TodaySales(CamelModel):
    sales: List[SaleOut]
    total: Money
    count: int
