# File: openwaitlist/schemas/waitlist.py

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, field_validator


class WaitlistBase(BaseModel):
    name: str = ""
    is_public: bool = False
    show_vendor_branding: bool = False


class WaitlistCreate(WaitlistBase):
    pass


class WaitlistUpdate(WaitlistBase):
    pass


class WaitlistRead(BaseModel):
    id: int
    slug: str
    name: str
    owner_user_id: int
    is_public: bool
    show_vendor_branding: bool
    created_at: datetime
    # dropped from responses while None (routes use response_model_exclude_none)
    archived_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("created_at", "archived_at")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # timestamps are stored in UTC; SQLite hands them back naive
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class WaitlistList(BaseModel):
    waitlists: List[WaitlistRead]
    total: int
