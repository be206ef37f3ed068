# File: openwaitlist/api/deps.py

from typing import Any, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from openwaitlist.core.security import decode_access_token
from openwaitlist.db.interface import Database
from openwaitlist.exceptions import UnauthorizedError
from openwaitlist.services.auth_service import AuthService
from openwaitlist.services.waitlist_service import WaitlistService

JWT_COOKIE = "JWT"
JWT_HEADER = "X-JWT"

bearer_scheme = HTTPBearer(auto_error=False)


def get_database(request: Request) -> Database:
    """
    The store handle the application was built with.

    Usage in route functions:
        database: Database = Depends(get_database)
    """
    return request.app.state.database


def get_auth_service(database: Database = Depends(get_database)) -> AuthService:
    return AuthService(database)


def get_waitlist_service(database: Database = Depends(get_database)) -> WaitlistService:
    return WaitlistService(database)


def get_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Bearer header first, then the X-JWT header, then the JWT cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    token = request.headers.get(JWT_HEADER) or request.cookies.get(JWT_COOKIE)
    if not token:
        raise UnauthorizedError("Not authenticated")
    return token


def get_token_claims(token: str = Depends(get_token)) -> dict[str, Any]:
    return decode_access_token(token)


def get_current_user_id(
    claims: dict[str, Any] = Depends(get_token_claims),
    auth_service: AuthService = Depends(get_auth_service),
) -> int:
    return auth_service.resolve_user_id(claims)
