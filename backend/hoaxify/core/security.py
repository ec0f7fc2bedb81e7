# hoaxify/core/security.py
from __future__ import annotations

import secrets

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


# -------------------------
# Password hashing
# -------------------------
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


# -------------------------
# Opaque tokens
# -------------------------
def random_string(length: int) -> str:
    """
    Hex string of exactly `length` characters, used for bearer tokens,
    activation / password-reset tokens and stored filenames.
    """
    return secrets.token_hex(length)[:length]
