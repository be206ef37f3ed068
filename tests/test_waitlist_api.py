# File: tests/test_waitlist_api.py

import re

import pytest
from fastapi.testclient import TestClient

from openwaitlist.core.config import Settings
from openwaitlist.db.init_db import bootstrap
from openwaitlist.db.sqlalchemy_db import SQLAlchemyDatabase
from openwaitlist.exceptions import MigrationError
from openwaitlist.main import create_application

SLUG_PATTERN = re.compile(r"^[a-z0-9-]*-[a-z0-9]{6}$")


def create(client, headers, name="Beta Launch", **flags):
    resp = client.post("/waitlists", json={"name": name, **flags}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_end_to_end(client, alice):
    created = create(client, alice, "Beta Launch")
    old_slug = created["slug"]

    resp = client.get("/waitlists", headers=alice)
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert [w["name"] for w in body["waitlists"]] == ["Beta Launch"]
    assert SLUG_PATTERN.match(body["waitlists"][0]["slug"])

    resp = client.put(f"/waitlists/{old_slug}", json={"name": "Beta Launch v2"}, headers=alice)
    assert resp.status_code == 200
    new_slug = resp.json()["slug"]
    assert new_slug != old_slug
    assert new_slug.startswith("beta-launch-v2-")

    assert client.get(f"/waitlists/{new_slug}", headers=alice).status_code == 200
    assert client.get(f"/waitlists/{old_slug}", headers=alice).status_code == 404

    resp = client.delete(f"/waitlists/{new_slug}", headers=alice)
    assert resp.status_code == 204
    assert resp.content == b""

    assert client.get("/waitlists", headers=alice).json() == {"waitlists": [], "total": 0}
    for slug in (old_slug, new_slug):
        assert client.get(f"/waitlists/{slug}", headers=alice).status_code == 404


class TestWaitlistShape:
    def test_fields(self, client, alice):
        created = create(client, alice, "Shape", is_public=True)
        assert set(created) == {
            "id", "slug", "name", "owner_user_id",
            "is_public", "show_vendor_branding", "created_at",
        }
        assert created["is_public"] is True
        assert created["show_vendor_branding"] is False
        assert "T" in created["created_at"]

    def test_owner_is_caller(self, client, alice):
        me = client.get("/auth/user", headers=alice).json()
        assert create(client, alice)["owner_user_id"] == me["id"]


class TestValidation:
    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name_on_create(self, client, alice, name):
        resp = client.post("/waitlists", json={"name": name}, headers=alice)
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Name is required", "code": "VALIDATION_ERROR"}

    def test_empty_name_on_update(self, client, alice):
        slug = create(client, alice)["slug"]
        resp = client.put(f"/waitlists/{slug}", json={"name": ""}, headers=alice)
        assert resp.status_code == 400
        # unchanged
        assert client.get(f"/waitlists/{slug}", headers=alice).json()["name"] == "Beta Launch"

    def test_wrongly_typed_body(self, client, alice):
        resp = client.post("/waitlists", json={"name": ["a", "list"]}, headers=alice)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid request body"


class TestOwnership:
    def test_other_user_is_forbidden(self, client, alice, bob):
        slug = create(client, alice)["slug"]

        assert client.get(f"/waitlists/{slug}", headers=bob).status_code == 403
        resp = client.put(f"/waitlists/{slug}", json={"name": "Hijacked"}, headers=bob)
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Forbidden: You don't own this waitlist"
        assert client.delete(f"/waitlists/{slug}", headers=bob).status_code == 403

        assert client.get("/waitlists", headers=bob).json()["total"] == 0
        still_there = client.get(f"/waitlists/{slug}", headers=alice).json()
        assert still_there["name"] == "Beta Launch"

    def test_unknown_slug(self, client, alice):
        assert client.get("/waitlists/nope-000000", headers=alice).status_code == 404
        assert client.delete("/waitlists/nope-000000", headers=alice).status_code == 404


class TestArchive:
    def test_archived_slug_is_gone_everywhere(self, client, alice):
        slug = create(client, alice)["slug"]
        assert client.delete(f"/waitlists/{slug}", headers=alice).status_code == 204

        assert client.get(f"/waitlists/{slug}", headers=alice).status_code == 404
        assert client.put(f"/waitlists/{slug}", json={"name": "Back"}, headers=alice).status_code == 404
        assert client.delete(f"/waitlists/{slug}", headers=alice).status_code == 404


class TestList:
    def test_search_and_order(self, client, alice):
        create(client, alice, "Alpha")
        create(client, alice, "Beta launch")
        create(client, alice, "Closed beta")

        names = [w["name"] for w in client.get("/waitlists", headers=alice).json()["waitlists"]]
        assert names == ["Closed beta", "Beta launch", "Alpha"]

        resp = client.get("/waitlists", params={"search": "BETA"}, headers=alice)
        body = resp.json()
        assert body["total"] == 2
        assert [w["name"] for w in body["waitlists"]] == ["Closed beta", "Beta launch"]

        assert client.get("/waitlists", params={"search": "zzz"}, headers=alice).json()["total"] == 0


class TestHealth:
    def test_ok(self, client):
        resp = client.get("/healthz")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_store_down(self, app, client):
        app.state.database.close()
        resp = client.get("/healthz")
        assert resp.status_code == 503
        assert resp.json() == {"status": "unavailable"}


class TestStartup:
    def test_migration_failure_is_fatal(self, tmp_path):
        # no bundled scripts for sqlite
        with pytest.raises(MigrationError, match="unsupported database type"):
            bootstrap(SQLAlchemyDatabase(), f"sqlite:///{tmp_path / 'a.db'}")

    def test_app_refuses_to_start(self, tmp_path):
        settings = Settings(db_dsn=f"sqlite:///{tmp_path / 'b.db'}", storage_backend="postgresql")
        app = create_application(database=SQLAlchemyDatabase(), settings=settings)
        with pytest.raises(Exception):
            with TestClient(app):
                pass

    def test_unreachable_store(self, tmp_path):
        settings = Settings(db_dsn=f"sqlite:///{tmp_path / 'missing' / 'c.db'}")
        app = create_application(database=SQLAlchemyDatabase(), settings=settings)
        with pytest.raises(Exception):
            with TestClient(app):
                pass
