"""Tests for the /pages API endpoints and the trace middleware.

The workspace directory is pointed at ``tmp_path`` so the lifespan opens a
fresh on-disk store per test.  No network calls are made.
"""

from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from pagehub.api.app import create_app
from pagehub.common.trace_context import TRACE_HEADER


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def client(tmp_path, monkeypatch):
    """Return a TestClient whose lifespan uses an isolated workspace DB."""
    monkeypatch.setattr("pagehub.config.settings.workspace_dir", tmp_path)
    app = create_app()

    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _create_page(client, slug_url: str, page_type: str) -> dict:
    resp = client.post("/pages", json={"slug_url": slug_url, "page_type": page_type})
    assert resp.status_code == 201
    return resp.json()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestCreatePage:
    def test_creates_page_with_generated_fields(self, client):
        data = _create_page(client, "/home", "home")

        assert data["slug_url"] == "/home"
        assert data["page_type"] == "home"
        uuid.UUID(data["id"])
        assert "last_updated_at" in data
        assert "created_at" in data

    def test_keeps_extra_fields(self, client):
        resp = client.post(
            "/pages",
            json={"slug_url": "/about", "page_type": "institutional", "title": "About"},
        )
        assert resp.status_code == 201
        assert resp.json()["title"] == "About"

    def test_non_uuid_id_in_body_rejected(self, client):
        resp = client.post(
            "/pages", json={"id": "home-page", "slug_url": "/home", "page_type": "home"}
        )
        assert resp.status_code == 422
        assert client.get("/pages").json() == []

    def test_supplied_uuid_id_retrievable(self, client):
        supplied = uuid.uuid4()
        resp = client.post(
            "/pages",
            json={"id": str(supplied).upper(), "slug_url": "/home", "page_type": "home"},
        )
        assert resp.status_code == 201
        assert resp.json()["id"] == str(supplied)

        fetched = client.get(f"/pages/{resp.json()['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["slug_url"] == "/home"

    def test_duplicate_slug_conflicts(self, client):
        _create_page(client, "/home", "home")

        resp = client.post("/pages", json={"slug_url": "/home", "page_type": "landing"})

        assert resp.status_code == 409

    def test_unknown_page_type_rejected(self, client):
        resp = client.post("/pages", json={"slug_url": "/home", "page_type": "blogpost"})
        assert resp.status_code == 422

    def test_relative_slug_rejected(self, client):
        resp = client.post("/pages", json={"slug_url": "home", "page_type": "home"})
        assert resp.status_code == 422


class TestListPages:
    def test_empty_list(self, client):
        resp = client.get("/pages")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_returns_full_documents(self, client):
        _create_page(client, "/", "home")
        _create_page(client, "/shoes", "category")

        resp = client.get("/pages")

        assert resp.status_code == 200
        body = resp.json()
        assert [p["slug_url"] for p in body] == ["/", "/shoes"]
        assert all("id" in p for p in body)

    def test_filter_by_single_type_returns_summaries(self, client):
        _create_page(client, "/", "home")
        _create_page(client, "/shoes", "category")

        resp = client.get("/pages", params={"type": "category"})

        assert resp.status_code == 200
        body = resp.json()
        assert len(body) == 1
        assert set(body[0]) == {"slug_url", "page_type", "last_updated_at"}
        assert body[0]["slug_url"] == "/shoes"

    def test_filter_by_several_types(self, client):
        _create_page(client, "/", "home")
        _create_page(client, "/shoes", "category")
        _create_page(client, "/blog/a", "article")

        resp = client.get("/pages", params=[("type", "home"), ("type", "article")])

        assert [p["slug_url"] for p in resp.json()] == ["/", "/blog/a"]

    def test_unknown_type_filter_rejected(self, client):
        resp = client.get("/pages", params={"type": "blogpost"})
        assert resp.status_code == 422


class TestGetPage:
    def test_returns_page(self, client):
        created = _create_page(client, "/home", "home")

        resp = client.get(f"/pages/{created['id']}")

        assert resp.status_code == 200
        assert resp.json() == created

    def test_missing_page_is_404(self, client):
        resp = client.get(f"/pages/{uuid.uuid4()}")
        assert resp.status_code == 404

    def test_malformed_id_is_422(self, client):
        resp = client.get("/pages/not-an-id")
        assert resp.status_code == 422


class TestTraceMiddleware:
    def test_incoming_trace_id_echoed(self, client):
        resp = client.get("/pages", headers={TRACE_HEADER: "abc123"})
        assert resp.headers[TRACE_HEADER] == "abc123"

    def test_trace_id_minted_when_absent(self, client):
        first = client.get("/pages").headers[TRACE_HEADER]
        second = client.get("/pages").headers[TRACE_HEADER]

        assert len(first) == 16
        assert first != second
