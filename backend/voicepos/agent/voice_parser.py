"""
Voice command parser: spoken till command -> (quantity, product phrase).

Deterministic, no catalog access. Examples:
    "two milk"          -> 2, "milk"
    "3 coca cola"       -> 3, "coca cola"
    "add bread"         -> 1, "bread"
    "five buy sugar"    -> 5, "sugar"

Only the first token is considered for the quantity, then one leading
command verb is dropped from what remains.
"""
import re
from dataclasses import dataclass

# Extend freely; the parser only does a lookup
NUMBER_WORDS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14,
    "fifteen": 15, "sixteen": 16, "seventeen": 17, "eighteen": 18,
    "nineteen": 19, "twenty": 20,
}

COMMAND_VERBS = ("add", "get", "buy", "purchase")

_VERB_PREFIX = re.compile(r"^(?:%s)(?:\s+|$)" % "|".join(COMMAND_VERBS), re.IGNORECASE)


@dataclass(frozen=True)
class VoiceCommand:
    quantity: int
    product_query: str


def extract_quantity(token: str):
    """Quantity for a single token, or None if it is not a number."""
    if token.isascii() and token.isdigit():
        return int(token)
    return NUMBER_WORDS.get(token)


def parse_voice_command(utterance: str) -> VoiceCommand:
    words = (utterance or "").lower().split()

    quantity = extract_quantity(words[0]) if words else None
    if quantity is not None:
        phrase = " ".join(words[1:])
    else:
        quantity = 1
        phrase = " ".join(words)

    phrase = _VERB_PREFIX.sub("", phrase, count=1).strip()
    return VoiceCommand(quantity=quantity, product_query=phrase)
