import hashlib
import secrets

from passlib.context import CryptContext

from app.core.config import settings

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

RESET_TOKEN_BYTES = 32


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def generate_reset_token() -> str:
    """Return a raw password-reset token (hex, 256 bits of entropy)."""
    return secrets.token_hex(RESET_TOKEN_BYTES)


def hash_reset_token(raw_token: str) -> str:
    """One-way hash of a reset token; only this value is ever stored."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()
