# tripchat/core/security.py
"""
Security module for authentication.
Handles password hashing and JWT access token creation/validation.
"""
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext

from tripchat.config import settings

# Password hashing context
# Argon2 only; every hash carries its own random salt
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)

# JWT configuration
JWT_SECRET = settings.jwt_secret  # Process-wide signing secret; rotating it invalidates every issued token
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes
JWT_ALG = "HS256"  # HMAC SHA-256

def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (salt included, safe to store in database)
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a stored hash.

    Returns False instead of raising when the stored hash is not a
    recognised Argon2 hash.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False

def create_access_token(user_id: str, email: str, now: dt.datetime | None = None) -> str:
    """
    Create a signed JWT access token asserting a user's identity.

    Args:
        user_id: User identifier (UUID string)
        email: Normalized user email, used downstream as the caller identity
        now: Issue time (defaults to the current UTC time)

    Returns:
        Encoded JWT token string

    Token payload includes:
        - sub: Subject (user ID)
        - email: User email
        - iat: Issued at timestamp
        - exp: Expiration timestamp (iat + ACCESS_TOKEN_EXPIRE_MINUTES, absolute)
    """
    if now is None:
        now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "iat": now,
        "exp": now + dt.timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)

def decode_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.

    Returns:
        Decoded token payload dictionary

    Raises:
        jwt.ExpiredSignatureError: If the token is at or past its expiry
        jwt.InvalidTokenError: If the token is malformed or the signature does not match
    """
    return jwt.decode(
        token,
        JWT_SECRET,
        algorithms=[JWT_ALG],
        options={"require": ["sub", "email", "exp", "iat"]},
    )
