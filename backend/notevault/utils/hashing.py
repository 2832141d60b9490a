"""Secret hashing helpers using passlib.

Two kinds of secrets go through here:
- account passwords (register/login): hash_password / verify_password
- note lock PINs: hash_pin / verify_pin

Both use the same bcrypt CryptContext, so every hash is salted and one-way.
The bcrypt cost can be set with the environment variable `BCRYPT_ROUNDS` (int).
If the bcrypt backend cannot be initialized the context falls back to
pbkdf2_sha256, which is also salted.

verify_password treats an unreadable stored hash as a failed login.
verify_pin does not: a PIN hash we wrote ourselves that passlib cannot read is
an infrastructure fault and the error propagates.
"""
from __future__ import annotations

import os
import warnings
from typing import Optional

from passlib.context import CryptContext

bcrypt_rounds = os.environ.get("BCRYPT_ROUNDS")
if bcrypt_rounds is not None:
    try:
        rounds = int(bcrypt_rounds)
    except ValueError:
        rounds = None
else:
    rounds = None


def _build_context() -> CryptContext:
    try:
        if rounds:
            ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        else:
            ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")
        # force backend load now rather than on the first request
        ctx.hash("test")
        return ctx
    except Exception as exc:
        warnings.warn(
            "bcrypt backend not available or failed to initialize; falling back to pbkdf2_sha256. "
            f"Original error: {exc}",
            RuntimeWarning,
        )
    if rounds:
        return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto", pbkdf2_sha256__rounds=rounds)
    return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


pwd_context = _build_context()


def hash_password(plain: str) -> str:
    """Hash a plaintext password and return the encoded hash string."""
    if plain is None:
        raise ValueError("Password must not be None")
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plaintext password against a stored hash.

    Returns True if the password matches, False otherwise.
    """
    if plain is None or hashed is None:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def hash_pin(pin: str) -> str:
    if not pin:
        raise ValueError("PIN must not be empty")
    return pwd_context.hash(pin)


def verify_pin(pin: Optional[str], pin_hash: Optional[str]) -> bool:
    if not pin or not pin_hash:
        return False
    return pwd_context.verify(pin, pin_hash)
