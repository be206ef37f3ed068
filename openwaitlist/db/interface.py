# File: openwaitlist/db/interface.py

"""
Persistence contract for the service layer.

Lookups return None when nothing (active) matches. Writes fill in the
store-assigned fields (id, timestamps) on the object they are given and
return it. Every operation raises DatabaseNotConnectedError until connect()
has succeeded.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from openwaitlist.models.user import User
from openwaitlist.models.waitlist import Waitlist


class Database(ABC):

    # ---------- lifecycle ----------

    @abstractmethod
    def connect(self, dsn: str) -> None: ...

    @abstractmethod
    def ping(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    @abstractmethod
    def migrate(self) -> List[str]: ...

    # ---------- users ----------

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, user: User) -> User:
        """Raises DuplicateRecordError if the email is taken."""

    # ---------- waitlists ----------

    @abstractmethod
    def get_waitlists_by_owner(self, owner_user_id: int, search: str = "") -> List[Waitlist]:
        """Active waitlists of one owner, newest first, optionally filtered by name."""

    @abstractmethod
    def create_waitlist(self, waitlist: Waitlist) -> Waitlist:
        """Raises DuplicateRecordError if the slug is taken."""

    @abstractmethod
    def get_waitlist_by_id(self, waitlist_id: int) -> Optional[Waitlist]: ...

    @abstractmethod
    def get_waitlist_by_slug(self, slug: str) -> Optional[Waitlist]: ...

    @abstractmethod
    def update_waitlist(self, waitlist: Waitlist) -> None:
        """Overwrite slug, name and flags. Archived or missing rows are left alone."""

    @abstractmethod
    def archive_waitlist(self, waitlist_id: int) -> None:
        """Soft delete. Already archived or missing rows are left alone."""
