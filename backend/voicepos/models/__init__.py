from voicepos.models.user import User
from voicepos.models.product import Product
from voicepos.models.sale import Sale, SaleItem
from voicepos.models.invoice_counter import InvoiceCounter

__all__ = ["User", "Product", "Sale", "SaleItem", "InvoiceCounter"]
