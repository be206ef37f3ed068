# File: tests/test_migrate.py

import pytest
from sqlalchemy import create_engine, inspect, text

from openwaitlist.db.migrate import (
    discover_migrations,
    migrations_dir,
    run_migrations,
    script_statements,
)
from openwaitlist.db.sqlalchemy_db import SQLAlchemyDatabase
from openwaitlist.exceptions import MigrationError


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'migrations.db'}")
    yield engine
    engine.dispose()


@pytest.fixture
def scripts(tmp_path):
    directory = tmp_path / "scripts"
    directory.mkdir()

    def _write(name: str, sql: str):
        (directory / name).write_text(sql, encoding="utf-8")

    _write.directory = directory
    return _write


def versions(engine):
    with engine.connect() as conn:
        return [row[0] for row in conn.execute(text("SELECT version FROM schema_migrations ORDER BY version"))]


def count_things(engine):
    with engine.connect() as conn:
        return conn.execute(text("SELECT COUNT(*) FROM things")).scalar_one()


def test_applies_pending_in_order_once(engine, scripts):
    scripts("0010_seed.up.sql", "INSERT INTO things (name) VALUES ('a');\nINSERT INTO things (name) VALUES ('b');")
    scripts("0002_things.up.sql", "CREATE TABLE things (id INTEGER PRIMARY KEY, name TEXT NOT NULL);")
    scripts("0003_things.down.sql", "DROP TABLE things;")
    scripts("README.md", "not a migration")

    applied = run_migrations(engine, scripts.directory)
    assert applied == ["0002_things", "0010_seed"]
    assert versions(engine) == ["0002_things", "0010_seed"]
    assert count_things(engine) == 2

    # second run is a no-op
    assert run_migrations(engine, scripts.directory) == []
    assert count_things(engine) == 2


def test_new_files_are_picked_up_later(engine, scripts):
    scripts("0001_things.up.sql", "CREATE TABLE things (id INTEGER PRIMARY KEY, name TEXT NOT NULL)")
    run_migrations(engine, scripts.directory)

    scripts("0002_seed.up.sql", "INSERT INTO things (name) VALUES ('late')")
    assert run_migrations(engine, scripts.directory) == ["0002_seed"]
    assert count_things(engine) == 1


def test_failure_rolls_back_file_and_halts(engine, scripts):
    scripts("0001_things.up.sql", "CREATE TABLE things (id INTEGER PRIMARY KEY, name TEXT NOT NULL)")
    scripts("0002_broken.up.sql", "INSERT INTO things (name) VALUES ('x');\nINSERT INTO missing_table VALUES (1);")
    scripts("0003_later.up.sql", "CREATE TABLE later (id INTEGER PRIMARY KEY)")

    with pytest.raises(MigrationError, match="0002_broken"):
        run_migrations(engine, scripts.directory)

    assert versions(engine) == ["0001_things"]
    assert count_things(engine) == 0
    assert "later" not in inspect(engine).get_table_names()


def test_sqlite_scripts_are_split_per_statement():
    sql = "CREATE TABLE a (id INT);\n\n  INSERT INTO a VALUES (1) ;\n;"
    assert script_statements(sql, "sqlite") == ["CREATE TABLE a (id INT)", "INSERT INTO a VALUES (1)"]


def test_postgres_scripts_run_whole():
    sql = "INSERT INTO notes (body) VALUES ('a; b');\nCREATE INDEX idx_notes ON notes (body);\n"
    assert script_statements(sql, "postgresql") == [sql]
    assert script_statements("  \n", "postgresql") == []


def test_bundled_postgres_migrations():
    found = [version for version, _ in discover_migrations(migrations_dir("postgresql"))]
    assert found == ["0001_users_and_waitlists", "0002_waitlists_unique_slug"]


def test_unknown_dialect():
    with pytest.raises(MigrationError, match="unsupported database type"):
        migrations_dir("oracle")


def test_database_migrate_without_bundled_scripts(tmp_path):
    db = SQLAlchemyDatabase()
    db.connect(f"sqlite:///{tmp_path / 'x.db'}")
    try:
        with pytest.raises(MigrationError):
            db.migrate()
    finally:
        db.close()


def test_database_migrate_with_explicit_path(tmp_path, scripts):
    scripts("0001_things.up.sql", "CREATE TABLE things (id INTEGER PRIMARY KEY, name TEXT NOT NULL)")
    db = SQLAlchemyDatabase(migrations_path=scripts.directory)
    db.connect(f"sqlite:///{tmp_path / 'y.db'}")
    try:
        assert db.migrate() == ["0001_things"]
        assert db.migrate() == []
    finally:
        db.close()
