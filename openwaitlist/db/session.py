# File: openwaitlist/db/session.py

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, sessionmaker

# plain libpq-style DSNs are routed to the psycopg 3 driver
_POSTGRES_SCHEMES = ("postgres://", "postgresql://")
PSYCOPG_SCHEME = "postgresql+psycopg://"


def normalize_dsn(dsn: str) -> str:
    for scheme in _POSTGRES_SCHEMES:
        if dsn.startswith(scheme):
            return PSYCOPG_SCHEME + dsn[len(scheme):]
    return dsn


def describe_dsn(dsn) -> str:
    """host:port/database without credentials, for log lines."""
    url = make_url(dsn)
    return f"{url.host or 'localhost'}:{url.port or ''}/{url.database or ''}"


def build_engine(dsn: str) -> Engine:
    dsn = normalize_dsn(dsn)
    return create_engine(
        dsn,
        pool_pre_ping=True,
        connect_args={"check_same_thread": False} if dsn.startswith("sqlite") else {},
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    # objects outlive their session; they are handed to the service layer
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
