# File: openwaitlist/services/auth_service.py

"""
Authentication service.

Bridges token claims and credentials to rows in the users table:
  - signup of local (password) users
  - the credential check used when issuing tokens
  - turning verified token claims into a user id

Hashing and token signing live in core.security.
"""

import logging
from typing import Any, Mapping, Optional

from openwaitlist.core.security import MAX_PASSWORD_BYTES, hash_password, verify_password
from openwaitlist.db.interface import Database
from openwaitlist.exceptions import (
    ConflictError,
    DuplicateRecordError,
    UnauthorizedError,
    ValidationError,
)
from openwaitlist.models.user import LOCAL_PROVIDER, User

logger = logging.getLogger(__name__)

USER_EXISTS_MESSAGE = "User with this email already exists"


class AuthService:
    def __init__(self, database: Database):
        self.database = database

    def signup(
        self,
        *,
        email: str,
        password: str,
        display_name: Optional[str] = None,
    ) -> User:
        """
        Create a local user.

        Raises:
            ValidationError: missing email/password, email without "@",
                password longer than bcrypt accepts
            ConflictError: the email is already registered
        """
        if not email or not password:
            raise ValidationError("Email and password are required")
        if "@" not in email:
            raise ValidationError("Invalid email format")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        if self.database.get_user_by_email(email) is not None:
            raise ConflictError(USER_EXISTS_MESSAGE)

        user = User(
            email=email,
            auth_provider=LOCAL_PROVIDER,
            password_hash=hash_password(password),
            display_name=display_name or None,
        )
        try:
            self.database.create_user(user)
        except DuplicateRecordError:
            # lost a race with a concurrent signup
            raise ConflictError(USER_EXISTS_MESSAGE)

        logger.info(f"User created successfully: email={email} user_id={user.id}")
        return user

    def authenticate_user(self, *, email: str, password: str) -> Optional[User]:
        """
        Return the user if the password matches, otherwise None.

        Only local users with a stored hash can log in this way.
        """
        user = self.database.get_user_by_email(email)
        if user is None:
            logger.info(f"Login rejected: unknown user {email}")
            return None
        if user.auth_provider != LOCAL_PROVIDER:
            logger.info(f"Login rejected: {email} does not use local authentication")
            return None
        if user.password_hash is None:
            logger.info(f"Login rejected: {email} has no password set")
            return None
        if not verify_password(password, user.password_hash):
            logger.info(f"Login rejected: bad password for {email}")
            return None
        return user

    def check_credentials(self, email: str, password: str) -> bool:
        return self.authenticate_user(email=email, password=password) is not None

    def resolve_user_id(self, claims: Mapping[str, Any]) -> int:
        """
        Map verified token claims to a users.id.

        A numeric user_id claim is trusted as-is; otherwise the email claim
        (or sub) is looked up.

        Raises:
            UnauthorizedError: no usable claim, or the email is unknown
        """
        raw_id = claims.get("user_id")
        if raw_id not in (None, ""):
            try:
                return int(raw_id)
            except (TypeError, ValueError):
                logger.debug(f"Ignoring non-numeric user_id claim: {raw_id!r}")

        email = claims.get("email") or claims.get("sub")
        if not email:
            raise UnauthorizedError("No email found in token")

        user = self.database.get_user_by_email(email)
        if user is None:
            raise UnauthorizedError("Unknown user")
        return user.id
