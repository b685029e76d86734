"""bcrypt digests for users.password_digest.

Raw passwords are never stored or logged; only the digest leaves this module.
"""

from __future__ import annotations

from passlib.context import CryptContext

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _bcrypt_input(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Digest for a new or changed password.

    Raises:
        ValueError: If password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")
    return pwd_context.hash(_bcrypt_input(password))


def verify_password(plain: str, hashed: str | None) -> bool:
    """True when ``plain`` matches ``hashed``; empty input never matches."""
    if not plain or not hashed:
        return False
    return pwd_context.verify(_bcrypt_input(plain), hashed)
