# app/core/security.py
"""
Security module for authentication.
Handles password hashing, JWT token creation/validation, and resolving a
presented credential to the identity string used for rooms and messages.
"""
import os
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext
from dotenv import load_dotenv
from pathlib import Path

from app.core.errors import AuthenticationError

# Load environment variables from project root
ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

# Argon2 only; passlib keeps the door open for rehashing later
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)

# JWT configuration
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret")  # Use a strong secret in production
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # One day, like the web client expects
JWT_ALG = "HS256"

def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str | None) -> bool:
    """
    Verify a plain text password against a hashed password.

    Accounts without a password hash never verify.
    """
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)

def create_access_token(user_id: str, role: str = "user") -> str:
    """
    Create a JWT access token.

    Token payload includes:
        - sub: Subject (user ID, always a string)
        - role: Account role
        - iat: Issued at timestamp
        - exp: Expiration timestamp
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + dt.timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)

def decode_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])

def authenticate_token(token: str | None) -> str:
    """
    Resolve a bearer credential to the identity it was issued for.

    Only the signature and expiry are checked; no database access happens
    here, so a rejected credential never reaches the message store.

    Returns:
        The canonical (string) user identity from the "sub" claim

    Raises:
        AuthenticationError: token missing, malformed, expired or without subject
    """
    if not token:
        raise AuthenticationError("No token provided", code="AUTH_REQUIRED")
    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired", code="AUTH_TOKEN_EXPIRED")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")
    subject = payload.get("sub")
    if subject is None or not str(subject).strip():
        raise AuthenticationError("Token carries no subject")
    return str(subject).strip()
