# File: openwaitlist/services/waitlist_service.py

"""
Ownership-scoped waitlist operations.

Every slug-keyed operation follows the same steps: look the waitlist up,
check the caller owns it, then act. A missing (or archived) waitlist is a
NotFoundError, someone else's is a ForbiddenError; both stop the operation.
"""

import logging
from typing import Callable, List, Tuple

from openwaitlist.db.interface import Database
from openwaitlist.exceptions import (
    DuplicateRecordError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from openwaitlist.models.waitlist import Waitlist
from openwaitlist.services.slug import generate_slug

logger = logging.getLogger(__name__)

SLUG_MAX_ATTEMPTS = 5


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Name is required")
    return cleaned


class WaitlistService:
    def __init__(self, database: Database):
        self.database = database

    def _with_fresh_slug(self, waitlist: Waitlist, write: Callable[[Waitlist], object]) -> None:
        """Assign a new slug and write, drawing another suffix on collision."""
        for attempt in range(1, SLUG_MAX_ATTEMPTS + 1):
            waitlist.slug = generate_slug(waitlist.name)
            try:
                write(waitlist)
                return
            except DuplicateRecordError:
                logger.warning(f"Slug collision on {waitlist.slug!r} (attempt {attempt})")
        raise InternalError(f"could not find a free slug for {waitlist.name!r}")

    def _get_owned(self, user_id: int, slug: str) -> Waitlist:
        waitlist = self.database.get_waitlist_by_slug(slug)
        if waitlist is None:
            raise NotFoundError("Waitlist not found")
        if waitlist.owner_user_id != user_id:
            raise ForbiddenError("Forbidden: You don't own this waitlist")
        return waitlist

    # ------------------------------------------------------------------

    def list_waitlists(self, user_id: int, search: str = "") -> Tuple[List[Waitlist], int]:
        waitlists = self.database.get_waitlists_by_owner(user_id, (search or "").strip())
        # total would be useful for pagination later
        return waitlists, len(waitlists)

    def create_waitlist(
        self,
        user_id: int,
        name: str,
        is_public: bool = False,
        show_vendor_branding: bool = False,
    ) -> Waitlist:
        waitlist = Waitlist(
            name=_clean_name(name),
            owner_user_id=user_id,
            is_public=is_public,
            show_vendor_branding=show_vendor_branding,
        )
        self._with_fresh_slug(waitlist, self.database.create_waitlist)
        logger.info(f"Waitlist created: {waitlist.slug} by user {user_id}")
        return waitlist

    def get_waitlist(self, user_id: int, slug: str) -> Waitlist:
        return self._get_owned(user_id, slug)

    def update_waitlist(
        self,
        user_id: int,
        slug: str,
        name: str,
        is_public: bool = False,
        show_vendor_branding: bool = False,
    ) -> Waitlist:
        new_name = _clean_name(name)
        waitlist = self._get_owned(user_id, slug)

        waitlist.name = new_name
        waitlist.is_public = is_public
        waitlist.show_vendor_branding = show_vendor_branding
        self._with_fresh_slug(waitlist, self.database.update_waitlist)

        logger.info(f"Waitlist updated: {slug} -> {waitlist.slug} by user {user_id}")
        return waitlist

    def delete_waitlist(self, user_id: int, slug: str) -> None:
        waitlist = self._get_owned(user_id, slug)
        self.database.archive_waitlist(waitlist.id)
        logger.info(f"Waitlist archived: {slug} by user {user_id}")
