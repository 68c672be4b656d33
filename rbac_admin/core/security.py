"""
One-way password hashing and verification.

Plaintext secrets and stored hashes are never logged or returned.
"""
from passlib.context import CryptContext

from rbac_admin.core.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    """Return True only when ``plain`` matches ``hashed``.

    A missing user is checked against a dummy hash so that both failure
    paths take the same time and return the same answer.
    """
    if not hashed:
        pwd_context.dummy_verify()
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # Stored value is not a recognizable hash
        return False
