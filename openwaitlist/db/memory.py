# File: openwaitlist/db/memory.py

"""
Dict-backed implementation of the persistence contract.

Used by the test-suite and by STORAGE_BACKEND=memory for local demos.
Rows are copied on the way in and out so callers cannot mutate stored
state behind the store's back, matching the detached objects the SQL
implementation hands out.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from openwaitlist.db.interface import Database
from openwaitlist.exceptions import DatabaseNotConnectedError, DuplicateRecordError
from openwaitlist.models.user import User
from openwaitlist.models.waitlist import Waitlist

logger = logging.getLogger(__name__)

_USER_FIELDS = (
    "id", "email", "auth_provider", "password_hash",
    "created_at", "updated_at", "display_name",
)
_WAITLIST_FIELDS = (
    "id", "slug", "name", "owner_user_id", "is_public",
    "show_vendor_branding", "created_at", "archived_at",
)


def _copy_user(user: User) -> User:
    return User(**{f: getattr(user, f) for f in _USER_FIELDS})


def _copy_waitlist(waitlist: Waitlist) -> Waitlist:
    return Waitlist(**{f: getattr(waitlist, f) for f in _WAITLIST_FIELDS})


class InMemoryDatabase(Database):
    def __init__(self):
        self._connected = False
        self._lock = threading.Lock()
        self._users: Dict[int, User] = {}
        self._waitlists: Dict[int, Waitlist] = {}
        self._next_user_id = 1
        self._next_waitlist_id = 1

    def _require_connection(self) -> None:
        if not self._connected:
            raise DatabaseNotConnectedError()

    def connect(self, dsn: str = "memory://") -> None:
        self._connected = True
        logger.info("Using in-memory database")

    def ping(self) -> None:
        self._require_connection()

    def close(self) -> None:
        self._connected = False

    def migrate(self) -> List[str]:
        self._require_connection()
        return []

    # ---------- users ----------

    def get_user_by_email(self, email: str) -> Optional[User]:
        self._require_connection()
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return _copy_user(user)
        return None

    def create_user(self, user: User) -> User:
        self._require_connection()
        with self._lock:
            if any(u.email == user.email for u in self._users.values()):
                raise DuplicateRecordError("error creating user: duplicate record")
            now = datetime.now(timezone.utc)
            user.id = self._next_user_id
            user.created_at = now
            user.updated_at = now
            self._next_user_id += 1
            self._users[user.id] = _copy_user(user)
        return user

    # ---------- waitlists ----------

    def _slug_taken(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        # archived rows keep their slug, like the UNIQUE constraint
        return any(w.slug == slug and w.id != exclude_id for w in self._waitlists.values())

    def get_waitlists_by_owner(self, owner_user_id: int, search: str = "") -> List[Waitlist]:
        self._require_connection()
        needle = search.lower()
        with self._lock:
            rows = [
                w for w in self._waitlists.values()
                if w.owner_user_id == owner_user_id
                and w.archived_at is None
                and needle in w.name.lower()
            ]
        rows.sort(key=lambda w: (w.created_at, w.id), reverse=True)
        return [_copy_waitlist(w) for w in rows]

    def create_waitlist(self, waitlist: Waitlist) -> Waitlist:
        self._require_connection()
        with self._lock:
            if self._slug_taken(waitlist.slug):
                raise DuplicateRecordError("error creating waitlist: duplicate record")
            waitlist.id = self._next_waitlist_id
            waitlist.created_at = datetime.now(timezone.utc)
            waitlist.archived_at = None
            if waitlist.is_public is None:
                waitlist.is_public = False
            if waitlist.show_vendor_branding is None:
                waitlist.show_vendor_branding = False
            self._next_waitlist_id += 1
            self._waitlists[waitlist.id] = _copy_waitlist(waitlist)
        return waitlist

    def get_waitlist_by_id(self, waitlist_id: int) -> Optional[Waitlist]:
        self._require_connection()
        with self._lock:
            stored = self._waitlists.get(waitlist_id)
            if stored is None or stored.archived_at is not None:
                return None
            return _copy_waitlist(stored)

    def get_waitlist_by_slug(self, slug: str) -> Optional[Waitlist]:
        self._require_connection()
        with self._lock:
            for stored in self._waitlists.values():
                if stored.slug == slug and stored.archived_at is None:
                    return _copy_waitlist(stored)
        return None

    def update_waitlist(self, waitlist: Waitlist) -> None:
        self._require_connection()
        with self._lock:
            stored = self._waitlists.get(waitlist.id)
            if stored is None or stored.archived_at is not None:
                return
            if self._slug_taken(waitlist.slug, exclude_id=waitlist.id):
                raise DuplicateRecordError("error updating waitlist: duplicate record")
            stored.slug = waitlist.slug
            stored.name = waitlist.name
            stored.is_public = waitlist.is_public
            stored.show_vendor_branding = waitlist.show_vendor_branding

    def archive_waitlist(self, waitlist_id: int) -> None:
        self._require_connection()
        with self._lock:
            stored = self._waitlists.get(waitlist_id)
            if stored is not None and stored.archived_at is None:
                stored.archived_at = datetime.now(timezone.utc)
