# File: openwaitlist/schemas/user.py

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class SignupRequest(BaseModel):
    # plain strings so missing/blank values reach the service's own checks
    email: str = ""
    password: str = ""
    display_name: Optional[str] = None


class SignupResponse(BaseModel):
    success: bool
    message: str
    user_id: Optional[int] = None


class LoginRequest(BaseModel):
    user: str = Field(default="", validation_alias=AliasChoices("user", "email"))
    passwd: str = Field(default="", validation_alias=AliasChoices("passwd", "password"))


class UserRead(BaseModel):
    id: int
    email: str
    auth_provider: str
    display_name: Optional[str] = None

    class Config:
        from_attributes = True  # Pydantic v2: replaces orm_mode


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRead
