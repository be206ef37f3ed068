# File: openwaitlist/models/user.py

"""
User model.

A user either signed up with a password (auth_provider "local", password_hash
set) or came in through an external provider (password_hash NULL).
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from openwaitlist.models.base import Base, IdType

LOCAL_PROVIDER = "local"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    auth_provider: Mapped[str] = mapped_column(String(50), nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    @property
    def is_local(self) -> bool:
        return self.auth_provider == LOCAL_PROVIDER

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email!r}, auth_provider={self.auth_provider!r})"
