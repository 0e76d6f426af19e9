"""
Voice command resolution against the owner's catalog.

parse -> first findByName match -> stock check. This is a dry lookup:
stock is only committed at checkout. apply_voice_command() then hands the
match straight to the cart's add().
"""
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from voicepos.agent.voice_parser import VoiceCommand, parse_voice_command
from voicepos.core.config import settings
from voicepos.core.exceptions import InsufficientStock, InvalidInput, ProductNotFound
from voicepos.models.product import Product
from voicepos.services.cart import Cart
from voicepos.services.catalog_service import find_by_name
from voicepos.services.invoice_service import to_money

logger = logging.getLogger(__name__)


@dataclass
class VoiceMatch:
    command: VoiceCommand
    product: Product

    @property
    def line_total(self):
        return to_money(self.product.price) * self.command.quantity

    @property
    def message(self) -> str:
        return (
            f"Added {self.command.quantity} {self.product.name}. "
            f"Total is {settings.CURRENCY_LABEL} {self.line_total:.2f}"
        )


def resolve_voice_command(db: Session, owner_id: int, utterance: str) -> VoiceMatch:
    command = parse_voice_command(utterance)
    if command.quantity < 1:
        raise InvalidInput("Quantity must be at least 1")
    if not command.product_query:
        raise InvalidInput("No product named in voice command")

    matches = find_by_name(db, owner_id, command.product_query, limit=1)
    if not matches:
        logger.info(f"[Voice] owner={owner_id} no product for '{command.product_query}'")
        raise ProductNotFound(command.product_query)

    product = matches[0]
    if product.stock < command.quantity:
        logger.info(
            f"[Voice] owner={owner_id} '{utterance}' wants {command.quantity} "
            f"{product.name}, only {product.stock} left"
        )
        raise InsufficientStock(product.name, product.stock)

    logger.info(f"[Voice] owner={owner_id} '{utterance}' -> {command.quantity} x product {product.id} ({product.name})")
    return VoiceMatch(command=command, product=product)


def apply_voice_command(cart: Cart, db: Session, owner_id: int, utterance: str) -> VoiceMatch:
    match = resolve_voice_command(db, owner_id, utterance)
    cart.add(match.product, match.command.quantity)
    return match
