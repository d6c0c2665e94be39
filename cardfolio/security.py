"""
Security utilities: password hashing, JWT tokens, and random tokens.

Three concerns are handled here:

1. PASSWORD HASHING (Argon2)
   - Passwords are never stored in plaintext
   - passlib's CryptContext wraps Argon2id and handles future scheme
     migrations ("deprecated='auto'")

2. JWT TOKENS (JSON Web Tokens)
   - After login/registration the user receives a signed JWT with their id
   - Signed with SECRET_KEY using HS256; expires after
     ACCESS_TOKEN_EXPIRE_MINUTES

3. RANDOM TOKENS
   - URL-safe strings used for public-link slugs and device ids
   - Drawn from the `secrets` CSPRNG so slugs printed on NFC tags can't be
     guessed from their neighbours in a batch
"""

import secrets
import string
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from jose import jwt
from passlib.context import CryptContext

from cardfolio.config import settings


# ---------------------------------------------------------------------------
# 1. Password Hashing (Argon2)
# ---------------------------------------------------------------------------

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """Hash a plaintext password using Argon2id."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against a stored Argon2 hash (constant time)."""
    return pwd_context.verify(plain_password, hashed_password)


# ---------------------------------------------------------------------------
# 2. JWT Tokens
# ---------------------------------------------------------------------------


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Create a signed JWT access token.

    The token payload contains:
      - "sub": The subject (user ID as string)
      - "exp": Expiration timestamp

    Args:
        data: Dictionary of claims to encode (must include "sub").
        expires_delta: Optional custom expiration time. Defaults to
                       ACCESS_TOKEN_EXPIRE_MINUTES from settings.

    Returns:
        An encoded JWT string.
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and verify a JWT access token.

    Raises:
        JWTError: If the token is expired, tampered with, or invalid.
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


# ---------------------------------------------------------------------------
# 3. Random tokens
# ---------------------------------------------------------------------------

TOKEN_ALPHABET = string.ascii_letters + string.digits

# Signature shared by generate_token and test doubles
TokenGenerator = Callable[[int], str]


def generate_token(length: int) -> str:
    """
    Return a random URL-safe token of exactly `length` characters.

    62 symbols per position: a 10-character slug has ~59 bits of entropy,
    so a collision on any single draw is negligible.
    """
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))
