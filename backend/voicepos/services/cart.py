"""
Till cart: a transient product -> quantity mapping with derived totals.

The cart is held by the client and never persisted. The server rebuilds one
from the client's lines when it needs to apply a change (voice commands) and
hands back the result; checkout consumes `checkout_items()`.
"""
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from voicepos.core.exceptions import InvalidInput
from voicepos.services.invoice_service import calculate_tax, to_money


@dataclass
class CartLine:
    product_id: int
    name: str
    unit_price: Decimal
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class Cart:
    def __init__(self, lines: Optional[Iterable[CartLine]] = None):
        self._lines: "OrderedDict[int, CartLine]" = OrderedDict()
        for line in lines or ():
            self.add_line(line.product_id, line.name, line.unit_price, line.quantity)

    def add_line(self, product_id: int, name: str, unit_price, quantity: int = 1) -> CartLine:
        if quantity < 1:
            raise InvalidInput("Quantity must be at least 1")
        existing = self._lines.get(product_id)
        if existing:
            existing.quantity += quantity
            return existing
        line = CartLine(product_id=product_id, name=name, unit_price=to_money(unit_price), quantity=quantity)
        self._lines[product_id] = line
        return line

    def add(self, product, quantity: int = 1) -> CartLine:
        """Add a catalog product; repeated adds merge into one line."""
        return self.add_line(product.id, product.name, product.price, quantity)

    def update_quantity(self, product_id: int, quantity: int):
        if quantity < 1:
            self.remove(product_id)
            return
        line = self._lines.get(product_id)
        if line:
            line.quantity = quantity

    def remove(self, product_id: int):
        self._lines.pop(product_id, None)

    def clear(self):
        self._lines.clear()

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def __len__(self):
        return len(self._lines)

    def __contains__(self, product_id) -> bool:
        return product_id in self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self._lines.values()), Decimal("0.00"))

    def tax(self, tax_rate=0) -> Decimal:
        return calculate_tax(self.subtotal, tax_rate)["tax"]

    def total(self, tax_rate=0) -> Decimal:
        return calculate_tax(self.subtotal, tax_rate)["total"]

    def checkout_items(self) -> List[Tuple[int, int]]:
        return [(line.product_id, line.quantity) for line in self._lines.values()]

    def summary(self, tax_rate=0) -> dict:
        totals = calculate_tax(self.subtotal, tax_rate)
        return {
            "items": self.lines,
            "item_count": self.item_count,
            "subtotal": totals["subtotal"],
            "tax": totals["tax"],
            "total": totals["total"],
        }
