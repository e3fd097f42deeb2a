"""
Authentication utilities - JWT token handling and password hashing.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Header
from jose import ExpiredSignatureError, JWTError, jwt

from ..config import settings
from ..core.errors import Unauthorized

# Claims that may carry the user id, in order of preference. Tokens issued by
# the previous Node backend used "userId" or "id" instead of "sub".
USER_ID_CLAIMS = ("sub", "userId", "id")


@dataclass(frozen=True)
class AuthResult:
    """Outcome of verifying a bearer token: an identity or an error, never both."""
    user_id: Optional[str] = None
    username: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.user_id is not None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode in the token ("sub" should hold the user id)
        expires_delta: Optional expiration time delta

    Returns:
        str: Encoded JWT token
    """
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def verify_access_token(token: str) -> AuthResult:
    """
    Verify signature and expiry of a token and decode the identity.

    Args:
        token: JWT token string

    Returns:
        AuthResult: identity on success, error message otherwise
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        return AuthResult(error="Token has expired")
    except JWTError:
        return AuthResult(error="Invalid token")

    user_id = next((payload[c] for c in USER_ID_CLAIMS if payload.get(c)), None)
    if user_id is None:
        return AuthResult(error="Invalid token")

    return AuthResult(user_id=str(user_id), username=payload.get("username"))


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Strip the "Bearer " prefix; a header without it is taken as the raw token."""
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer":
        return credentials.strip() or None
    return authorization.strip() or None


async def get_current_user_id(authorization: Optional[str] = Header(None)) -> str:
    """
    Dependency to get current user ID from the bearer token.

    Raises:
        Unauthorized: If the header is missing or the token does not verify
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise Unauthorized("Unauthorized: No token provided")

    result = verify_access_token(token)
    if not result.ok:
        raise Unauthorized(result.error or "Invalid token")

    return result.user_id
