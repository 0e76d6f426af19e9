from decimal import Decimal
from typing import List

from pydantic import Field

from voicepos.schemas.base import CamelModel, Money
from voicepos.schemas.product import ProductOut


class CartLineIn(CamelModel):
    """A cart line as the till client holds it."""
    product_id: int
    name: str
    unit_price: Decimal
    quantity: int


class VoiceCommandRequest(CamelModel):
    utterance: str
    cart: List[CartLineIn] = Field(default_factory=list)
    tax_rate: Decimal = Decimal("0")


class ParsedCommand(CamelModel):
    quantity: int
    product_name_query: str


class CartLineOut(CamelModel):
    product_id: int
    name: str
    unit_price: Money
    quantity: int
    line_total: Money


class CartOut(CamelModel):
    items: List[CartLineOut]
    item_count: int
    subtotal: Money
    tax: Money
    total: Money


class VoiceCommandResponse(CamelModel):
    command: ParsedCommand
    product: ProductOut
    message: str
    cart: CartOut
