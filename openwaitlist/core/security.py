# File: openwaitlist/core/security.py

"""
Token and password primitives.

Signing and verification are delegated to python-jose, hashing to bcrypt.
This module only fixes the claim layout and the parameters.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from openwaitlist.core.config import settings
from openwaitlist.exceptions import UnauthorizedError

# bcrypt ignores (or rejects) input beyond this length
MAX_PASSWORD_BYTES = 72


def create_access_token(
    subject: str,
    *,
    email: Optional[str] = None,
    user_id: Optional[int] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.token_duration))
    to_encode: dict[str, Any] = {
        "iss": settings.token_issuer,
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    if email is not None:
        to_encode["email"] = email
    if user_id is not None:
        to_encode["user_id"] = str(user_id)
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify signature, expiry and issuer and return the claims.

    Raises:
        UnauthorizedError: if the token is expired or otherwise invalid
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.algorithm],
            issuer=settings.token_issuer,
        )
    except ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except JWTError as exc:
        raise UnauthorizedError(f"Invalid token: {exc}")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
