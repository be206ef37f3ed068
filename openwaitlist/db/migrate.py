# File: openwaitlist/db/migrate.py

"""
Forward-only schema migrations.

Migration files live next to this module in migrations/<dialect>/ and are
named NNNN_description.up.sql. The version recorded in schema_migrations is
the filename without the .up.sql suffix. Pending files run in ascending
filename order, each in its own transaction together with the row that marks
it applied, so a failing file leaves no trace and stops the sequence.
"""

import logging
from pathlib import Path
from typing import List, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from openwaitlist.exceptions import MigrationError

logger = logging.getLogger(__name__)

MIGRATIONS_ROOT = Path(__file__).parent / "migrations"
MIGRATION_SUFFIX = ".up.sql"

CREATE_MIGRATIONS_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version VARCHAR(255) PRIMARY KEY,
    applied_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
)
"""


def migrations_dir(dialect: str = "postgresql") -> Path:
    directory = MIGRATIONS_ROOT / dialect
    if not directory.is_dir():
        raise MigrationError(f"unsupported database type: {dialect}")
    return directory


def discover_migrations(directory: Path) -> List[Tuple[str, Path]]:
    """Return (version, path) pairs sorted by filename."""
    files = sorted(
        (p for p in directory.iterdir() if p.is_file() and p.name.endswith(MIGRATION_SUFFIX)),
        key=lambda p: p.name,
    )
    return [(p.name[: -len(MIGRATION_SUFFIX)], p) for p in files]


# psycopg 3 runs a parameterless multi-statement script in one call
WHOLE_SCRIPT_DIALECTS = frozenset({"postgresql"})


def script_statements(sql: str, dialect: str) -> List[str]:
    """
    The statements to execute for one migration file.

    PostgreSQL gets the file as-is. Drivers that execute one statement per
    call (sqlite3) get it split on ';', so those scripts must not put ';'
    inside string literals or function bodies.
    """
    if dialect in WHOLE_SCRIPT_DIALECTS:
        return [sql] if sql.strip() else []
    return [stmt.strip() for stmt in sql.split(";") if stmt.strip()]


def applied_versions(engine: Engine) -> set[str]:
    with engine.begin() as conn:
        conn.execute(text(CREATE_MIGRATIONS_TABLE))
        rows = conn.execute(text("SELECT version FROM schema_migrations"))
        return {row[0] for row in rows}


def run_migrations(engine: Engine, directory: Path | None = None) -> List[str]:
    """
    Apply every pending migration in `directory`.

    Returns:
        The versions applied by this call, in order.

    Raises:
        MigrationError: on the first file that fails; later files are not tried
    """
    directory = directory or migrations_dir(engine.dialect.name)
    logger.info("Starting database migrations...")

    try:
        done = applied_versions(engine)
    except SQLAlchemyError as exc:
        logger.error(f"Failed to prepare schema_migrations table: {exc}")
        raise MigrationError(f"failed to prepare migrations table: {exc}") from exc

    applied: List[str] = []
    for version, path in discover_migrations(directory):
        if version in done:
            logger.debug(f"Migration {version} already applied, skipping")
            continue

        logger.info(f"Applying migration: {version}")
        try:
            statements = script_statements(path.read_text(encoding="utf-8"), engine.dialect.name)
            with engine.begin() as conn:
                for statement in statements:
                    conn.exec_driver_sql(statement, execution_options={"no_parameters": True})
                conn.execute(
                    text("INSERT INTO schema_migrations (version) VALUES (:version)"),
                    {"version": version},
                )
        except (OSError, SQLAlchemyError) as exc:
            logger.error(f"Failed to apply migration {version}: {exc}")
            raise MigrationError(f"failed to apply migration {version}: {exc}") from exc

        logger.info(f"Successfully applied migration: {version}")
        applied.append(version)

    logger.info("All migrations completed successfully")
    return applied
