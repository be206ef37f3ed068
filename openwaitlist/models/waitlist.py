# File: openwaitlist/models/waitlist.py

"""
Waitlist model.

Waitlists are never erased: deleting one stamps archived_at, and every
normal read filters archived rows out.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from openwaitlist.models.base import Base, IdType


class Waitlist(Base):
    __tablename__ = "waitlists"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    # "{name-slug}-{6 char suffix}"
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_user_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("users.id"), index=True, nullable=False
    )
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # if false, badges/mentions of OpenWaitlist are hidden on the public page
    show_vendor_branding: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None

    def __repr__(self) -> str:
        return f"Waitlist(id={self.id!r}, slug={self.slug!r}, owner_user_id={self.owner_user_id!r})"
