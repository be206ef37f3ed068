# File: tests/conftest.py

"""
Shared fixtures.

Environment defaults are set before anything imports openwaitlist, since
the settings object is built at import time.
"""

import os
import tempfile

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-the-suite")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "warning")
os.environ.setdefault("AVATAR_PATH", tempfile.mkdtemp(prefix="openwaitlist-avatars-"))

import pytest
from fastapi.testclient import TestClient

from openwaitlist.db.init_db import init_schema
from openwaitlist.db.memory import InMemoryDatabase
from openwaitlist.db.sqlalchemy_db import SQLAlchemyDatabase
from openwaitlist.main import create_application

DEFAULT_PASSWORD = "correct horse battery staple"


@pytest.fixture
def memory_db():
    db = InMemoryDatabase()
    db.connect()
    yield db
    db.close()


@pytest.fixture
def sql_db(tmp_path):
    """SQLAlchemyDatabase on a throwaway SQLite file, tables built from the models."""
    db = SQLAlchemyDatabase()
    db.connect(f"sqlite:///{tmp_path / 'openwaitlist.db'}")
    init_schema(db.engine)
    yield db
    db.close()


@pytest.fixture
def app():
    return create_application(database=InMemoryDatabase())


@pytest.fixture
def client(app):
    # entering the context runs the lifespan (connect + migrate)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    """
    Sign up + log in a user and return bearer headers for it.

    The session cookie set by login is dropped so each test chooses
    explicitly which identity a request carries.
    """

    def _register(email: str, password: str = DEFAULT_PASSWORD) -> dict:
        resp = client.post("/signup", json={"email": email, "password": password})
        assert resp.status_code == 201, resp.text
        resp = client.post("/auth/local/login", json={"user": email, "passwd": password})
        assert resp.status_code == 200, resp.text
        client.cookies.clear()
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _register


@pytest.fixture
def alice(register):
    return register("alice@example.com")


@pytest.fixture
def bob(register):
    return register("bob@example.com")
