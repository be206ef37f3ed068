# File: openwaitlist/db/sqlalchemy_db.py

"""
SQLAlchemy implementation of the persistence contract.

One Engine is created by connect() and kept for the process lifetime; each
operation runs in its own short Session on top of it. Driver errors are
logged and re-raised as DatabaseError with the failing action in the
message.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from sqlalchemy import select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from openwaitlist.db.interface import Database
from openwaitlist.db.migrate import run_migrations
from openwaitlist.db.session import build_engine, build_session_factory, describe_dsn
from openwaitlist.exceptions import (
    DatabaseError,
    DatabaseNotConnectedError,
    DuplicateRecordError,
)
from openwaitlist.models.user import User
from openwaitlist.models.waitlist import Waitlist

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_unique_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "sqlstate", None) == UNIQUE_VIOLATION:
        return True
    # sqlite3 carries no SQLSTATE
    return "UNIQUE constraint failed" in str(exc.orig)


class SQLAlchemyDatabase(Database):
    def __init__(self, migrations_path=None):
        self._engine: Optional[Engine] = None
        self._sessions: Optional[sessionmaker[Session]] = None
        self._migrations_path = migrations_path

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise DatabaseNotConnectedError()
        return self._engine

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def connect(self, dsn: str) -> None:
        try:
            engine = build_engine(dsn)
            logger.debug(f"Connecting to database at: {describe_dsn(engine.url)}")
            with engine.connect():
                pass
        except SQLAlchemyError as exc:
            logger.error(f"Failed to connect to database: {exc}")
            raise DatabaseError(f"failed to connect to database: {exc}") from exc

        self._engine = engine
        self._sessions = build_session_factory(engine)
        logger.info(f"Successfully connected to {engine.dialect.name}")

    def ping(self) -> None:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error(f"Database ping failed: {exc}")
            raise DatabaseError(f"database ping failed: {exc}") from exc
        logger.debug("Database ping successful")

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._sessions = None
            logger.info("Database connection closed")

    def migrate(self) -> List[str]:
        return run_migrations(self.engine, self._migrations_path)

    @contextmanager
    def _session(self, action: str, write: bool = False) -> Iterator[Session]:
        if self._sessions is None:
            raise DatabaseNotConnectedError()
        try:
            if write:
                with self._sessions.begin() as db:
                    yield db
            else:
                with self._sessions() as db:
                    yield db
        except IntegrityError as exc:
            if _is_unique_violation(exc):
                logger.info(f"Unique constraint rejected {action}")
                raise DuplicateRecordError(f"error {action}: duplicate record") from exc
            logger.error(f"Error {action}: {exc}")
            raise DatabaseError(f"error {action}: {exc}") from exc
        except SQLAlchemyError as exc:
            logger.error(f"Error {action}: {exc}")
            raise DatabaseError(f"error {action}: {exc}") from exc

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._session("getting user by email") as db:
            return db.scalars(select(User).where(User.email == email)).first()

    def create_user(self, user: User) -> User:
        now = _utcnow()
        user.created_at = now
        user.updated_at = now
        with self._session("creating user", write=True) as db:
            db.add(user)
            db.flush()
        logger.debug(f"Created user with ID: {user.id}")
        return user

    # ------------------------------------------------------------------
    # Waitlists
    # ------------------------------------------------------------------

    def get_waitlists_by_owner(self, owner_user_id: int, search: str = "") -> List[Waitlist]:
        stmt = select(Waitlist).where(
            Waitlist.owner_user_id == owner_user_id,
            Waitlist.archived_at.is_(None),
        )
        if search:
            stmt = stmt.where(Waitlist.name.icontains(search, autoescape=True))
        stmt = stmt.order_by(Waitlist.created_at.desc(), Waitlist.id.desc())

        with self._session("querying waitlists") as db:
            return list(db.scalars(stmt).all())

    def create_waitlist(self, waitlist: Waitlist) -> Waitlist:
        waitlist.created_at = _utcnow()
        waitlist.archived_at = None
        with self._session("creating waitlist", write=True) as db:
            db.add(waitlist)
            db.flush()
        logger.debug(f"Created waitlist with ID: {waitlist.id}")
        return waitlist

    def get_waitlist_by_id(self, waitlist_id: int) -> Optional[Waitlist]:
        stmt = select(Waitlist).where(Waitlist.id == waitlist_id, Waitlist.archived_at.is_(None))
        with self._session("getting waitlist by id") as db:
            return db.scalars(stmt).first()

    def get_waitlist_by_slug(self, slug: str) -> Optional[Waitlist]:
        stmt = select(Waitlist).where(Waitlist.slug == slug, Waitlist.archived_at.is_(None))
        with self._session("getting waitlist by slug") as db:
            return db.scalars(stmt).first()

    def update_waitlist(self, waitlist: Waitlist) -> None:
        stmt = (
            update(Waitlist)
            .where(Waitlist.id == waitlist.id, Waitlist.archived_at.is_(None))
            .values(
                slug=waitlist.slug,
                name=waitlist.name,
                is_public=waitlist.is_public,
                show_vendor_branding=waitlist.show_vendor_branding,
            )
            .execution_options(synchronize_session=False)
        )
        with self._session("updating waitlist", write=True) as db:
            db.execute(stmt)
        logger.debug(f"Updated waitlist with ID: {waitlist.id}")

    def archive_waitlist(self, waitlist_id: int) -> None:
        stmt = (
            update(Waitlist)
            .where(Waitlist.id == waitlist_id, Waitlist.archived_at.is_(None))
            .values(archived_at=_utcnow())
            .execution_options(synchronize_session=False)
        )
        with self._session("archiving waitlist", write=True) as db:
            db.execute(stmt)
        logger.debug(f"Archived waitlist with ID: {waitlist_id}")
