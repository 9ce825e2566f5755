from __future__ import annotations

import re

from passlib.context import CryptContext


MIN_PIN_LENGTH = 4
MAX_PIN_LENGTH = 12

_PIN_RE = re.compile(r"[0-9]+")


pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)


def is_valid_pin(pin: str | None) -> bool:
    """PINs are 4 to 12 digits."""
    if not pin:
        return False
    return MIN_PIN_LENGTH <= len(pin) <= MAX_PIN_LENGTH and bool(_PIN_RE.fullmatch(pin))


def hash_pin(pin: str) -> str:
    """Store an argon2 hash of the PIN, never the PIN itself."""
    return pwd_context.hash(pin)


def verify_pin(pin: str | None, stored_hash: str | None) -> bool:
    # exact match on the stored secret; an empty or missing PIN never matches
    if not pin or not stored_hash:
        return False
    return pwd_context.verify(pin, stored_hash)
