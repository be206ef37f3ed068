# File: openwaitlist/api/v1/routes_auth.py

"""
Signup and local-provider token endpoints.

Signing and verification of the tokens are done by python-jose (see
core.security); these routes only check credentials against the users
table and decide what goes into the token.
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from openwaitlist.api.deps import (
    JWT_COOKIE,
    JWT_HEADER,
    get_auth_service,
    get_current_user_id,
    get_database,
    get_token_claims,
)
from openwaitlist.core.config import settings
from openwaitlist.core.security import create_access_token
from openwaitlist.db.interface import Database
from openwaitlist.exceptions import (
    ForbiddenError,
    OpenWaitlistException,
    UnauthorizedError,
    ValidationError,
)
from openwaitlist.schemas.user import (
    LoginRequest,
    SignupRequest,
    SignupResponse,
    TokenResponse,
    UserRead,
)
from openwaitlist.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_REQUEST_MESSAGE = "Invalid request format"
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_signup_request(request: Request) -> Optional[SignupRequest]:
    """The parsed signup body, or None if it is not valid JSON of the right shape."""
    try:
        return SignupRequest.model_validate(await request.json())
    except ValueError:
        # JSONDecodeError and pydantic's ValidationError
        return None


async def read_login_request(request: Request) -> LoginRequest:
    """
    Credentials from either a form post (user, passwd) or a JSON body.

    The browser app posts application/x-www-form-urlencoded; API clients
    usually send JSON.
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            data = {key: value for key, value in form.items() if isinstance(value, str)}
        else:
            data = await request.json()
        return LoginRequest.model_validate(data)
    except ValueError:
        raise ValidationError(INVALID_REQUEST_MESSAGE)


def _signup_failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=SignupResponse(success=False, message=message).model_dump(exclude_none=True),
    )


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a local (password) user",
)
def signup(
    payload: Optional[SignupRequest] = Depends(read_signup_request),
    auth_service: AuthService = Depends(get_auth_service),
):
    if payload is None:
        return _signup_failure(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST_MESSAGE)

    try:
        user = auth_service.signup(
            email=payload.email,
            password=payload.password,
            display_name=payload.display_name,
        )
    except OpenWaitlistException as exc:
        if exc.status_code >= 500:
            logger.error(f"Signup failed: {exc.message}")
        return _signup_failure(exc.status_code, exc.public_message)

    return SignupResponse(success=True, message="User created successfully", user_id=user.id)


@router.post(
    "/auth/local/login",
    response_model=TokenResponse,
    summary="Log in with email and password",
)
def login(
    response: Response,
    payload: LoginRequest = Depends(read_login_request),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Check credentials and issue a signed token.

    The token is returned in the body, in the X-JWT header and as the JWT
    cookie, so both API clients and the browser app can use it.
    """
    user = None
    if payload.user and payload.passwd:
        user = auth_service.authenticate_user(email=payload.user, password=payload.passwd)
    if user is None:
        raise ForbiddenError("incorrect user or password")

    expires = timedelta(minutes=settings.token_duration)
    token = create_access_token(
        user.email,
        email=user.email,
        user_id=user.id,
        expires_delta=expires,
    )

    response.headers[JWT_HEADER] = token
    response.set_cookie(
        key=JWT_COOKIE,
        value=token,
        max_age=settings.cookie_duration * 3600,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )
    logger.info(f"User logged in: user_id={user.id}")
    return TokenResponse(
        access_token=token,
        expires_in=int(expires.total_seconds()),
        user=UserRead.model_validate(user),
    )


@router.get("/auth/logout", summary="Drop the session cookie")
def logout(response: Response):
    response.delete_cookie(JWT_COOKIE, path="/")
    return {"success": True}


@router.get("/auth/user", response_model=UserRead, summary="Current user")
def current_user(
    claims: dict = Depends(get_token_claims),
    user_id: int = Depends(get_current_user_id),
    database: Database = Depends(get_database),
):
    email = claims.get("email") or claims.get("sub")
    user = database.get_user_by_email(email) if email else None
    if user is None or user.id != user_id:
        raise UnauthorizedError("Unknown user")
    return user
