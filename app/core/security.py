"""
Security utilities for JWT authentication and password hashing.

Access and refresh tokens are HS256 JWTs carrying the user id in ``sub``
and a ``type`` claim so one cannot stand in for the other.
Passwords are hashed with bcrypt.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt
from passlib.context import CryptContext
from app.core.config import settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# Password hashing context (bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _bcrypt_input(password: str) -> bytes:
    # Bcrypt only looks at the first 72 bytes
    return password.encode('utf-8')[:72]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(_bcrypt_input(plain_password), hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Passwords longer than 72 bytes are truncated, matching what
    ``verify_password`` compares against.
    """
    return pwd_context.hash(_bcrypt_input(password))


def _encode(data: dict, token_type: str, lifetime: timedelta) -> str:
    claims = data.copy()
    claims.update({
        "exp": datetime.now(timezone.utc) + lifetime,
        "type": token_type,
    })
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode, typically {"sub": user_id, "role": role}
        expires_delta: Lifetime override (default: ACCESS_TOKEN_EXPIRE_MINUTES)
    """
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(data, ACCESS_TOKEN_TYPE, lifetime)


def create_refresh_token(data: dict) -> str:
    """Create a JWT refresh token valid for REFRESH_TOKEN_EXPIRE_DAYS."""
    return _encode(data, REFRESH_TOKEN_TYPE, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str) -> dict:
    """
    Decode and validate a JWT token.

    Raises:
        JWTError: If token is invalid or expired
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
