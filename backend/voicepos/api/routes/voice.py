"""Voice commands: "two milk" -> product lookup -> updated cart.

The server keeps no cart. The client sends its current lines, gets them back
with the spoken item merged in, and checks out through /sales as usual.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from voicepos.api.deps import get_current_user, get_db
from voicepos.models.user import User
from voicepos.schemas.voice import VoiceCommandRequest, VoiceCommandResponse
from voicepos.services.cart import Cart, CartLine
from voicepos.services.voice_service import apply_voice_command

router = APIRouter()


@router.post("/command", response_model=VoiceCommandResponse)
def voice_command(
    data: VoiceCommandRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    cart = Cart(
        CartLine(
            product_id=line.product_id,
            name=line.name,
            unit_price=line.unit_price,
            quantity=line.quantity,
        )
        for line in data.cart
    )
    match = apply_voice_command(cart, db, current_user.id, data.utterance)
    return {
        "command": {
            "quantity": match.command.quantity,
            "product_name_query": match.command.product_query,
        },
        "product": match.product,
        "message": match.message,
        "cart": cart.summary(data.tax_rate),
    }
