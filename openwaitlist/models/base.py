# File: openwaitlist/models/base.py

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase

# BIGSERIAL in PostgreSQL; SQLite only autoincrements INTEGER PRIMARY KEY
IdType = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    The schema itself is owned by the SQL migrations; the metadata here is
    only used for mapping and for building throwaway test databases.
    """
    pass
