"""
Database bootstrap helpers.

create_database() picks the persistence backend from settings; bootstrap()
runs the startup sequence (connect, ping, migrate) that must finish before
any request is served. init_schema() builds tables straight from the model
metadata and is only meant for throwaway databases.
"""

import logging

from sqlalchemy.engine import Engine

from openwaitlist.core.config import Settings
from openwaitlist.db.interface import Database
from openwaitlist.db.memory import InMemoryDatabase
from openwaitlist.db.sqlalchemy_db import SQLAlchemyDatabase
from openwaitlist.models.base import Base

# register tables on Base.metadata
from openwaitlist.models import user, waitlist  # noqa: F401

logger = logging.getLogger(__name__)


def create_database(settings: Settings) -> Database:
    if settings.storage_backend == "memory":
        return InMemoryDatabase()
    return SQLAlchemyDatabase()


def bootstrap(database: Database, dsn: str) -> None:
    """
    Connect, health-check and migrate.

    Any failure propagates; the caller is expected to abort startup.
    """
    logger.info("Initializing database...")
    database.connect(dsn)
    database.ping()
    logger.info("Running database migrations...")
    database.migrate()


def init_schema(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
