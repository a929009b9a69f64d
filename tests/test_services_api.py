"""HTTP request handler tests for /api/v1/services."""

import pytest

from conftest import set_environment_status


async def _create(client, **payload):
    return await client.post("/api/v1/services", json=payload)


class TestCreate:
    async def test_create_shell(self, client):
        r = await _create(client, name="env-x", datacenter_id=7)
        assert r.status_code == 201
        data = r.json()
        assert data["name"] == "env-x"
        assert data["version"] is None
        assert "definition" not in data
        assert "mapping" not in data

    async def test_create_build(self, client):
        r = await _create(client, name="env-x", id="b-1", type="terraform", definition="yaml")
        assert r.status_code == 201
        data = r.json()
        assert data["id"] == "b-1"
        assert data["status"] == "in_progress"
        assert data["version"] is not None
        assert data["definition"] == "yaml"
        assert "ids" not in data
        assert r.headers["X-Trace-Id"].startswith("trc_")

    async def test_conflict_reply(self, client):
        await _create(client, name="env-x", id="b-1", type="terraform")
        r = await _create(client, name="env-x", id="b-2", type="terraform")
        assert r.status_code == 409
        assert r.json()["error"]["code"] == "CONFLICT"

    async def test_malformed_body(self, client):
        r = await client.post("/api/v1/services", content=b"{oops")
        assert r.status_code == 400
        assert r.json()["error"]["code"] == "DECODE_ERROR"

    async def test_missing_name(self, client):
        r = await _create(client, id="b-1", type="terraform")
        assert r.status_code == 400
        assert r.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_trace_id_is_echoed(self, client):
        r = await client.post(
            "/api/v1/services", json={"name": "env-x"}, headers={"X-Trace-Id": "trc_fixed_id"}
        )
        assert r.headers["X-Trace-Id"] == "trc_fixed_id"


class TestRead:
    @pytest.fixture
    async def stored(self, client, session_factory):
        await _create(client, name="env-x", id="b-1", type="terraform", datacenter_id=1)
        await set_environment_status(session_factory, "env-x", "done")
        await _create(client, name="env-x", id="b-2", type="terraform")
        await _create(client, name="env-y", id="b-3", type="terraform", datacenter_id=2)

    async def test_find_by_body(self, client, stored):
        r = await client.post("/api/v1/services/find", json={"name": "env-x"})
        assert r.status_code == 200
        assert [s["id"] for s in r.json()] == ["b-2", "b-1"]

    async def test_find_ids_beat_name(self, client, stored):
        r = await client.post("/api/v1/services/find", json={"ids": ["b-1"], "name": "env-y"})
        assert [s["id"] for s in r.json()] == ["b-1"]

    async def test_list_by_query(self, client, stored):
        r = await client.get("/api/v1/services", params={"names": ["env-y"]})
        assert [s["id"] for s in r.json()] == ["b-3"]

        r = await client.get("/api/v1/services", params={"id": "b-1"})
        assert [s["id"] for s in r.json()] == ["b-1"]

        r = await client.get("/api/v1/services", params={"datacenter_id": 2})
        assert [s["id"] for s in r.json()] == ["b-3"]

    async def test_find_nothing(self, client, stored):
        r = await client.post("/api/v1/services/find", json={"name": "missing"})
        assert r.status_code == 200
        assert r.json() == []

    async def test_get_latest_by_name(self, client, stored):
        r = await client.post("/api/v1/services/get", json={"name": "env-x"})
        assert r.status_code == 200
        assert r.json()["id"] == "b-2"

    async def test_get_by_path(self, client, stored):
        r = await client.get("/api/v1/services/env-y")
        assert r.status_code == 200
        assert r.json()["id"] == "b-3"

    async def test_get_missing(self, client, stored):
        r = await client.post("/api/v1/services/get", json={"id": "nope"})
        assert r.status_code == 404
        assert r.json()["error"]["code"] == "NOT_FOUND"

        r = await client.get("/api/v1/services/nope")
        assert r.status_code == 404


class TestSetAndDelete:
    async def test_set_updates_credentials_only(self, client, session_factory):
        await _create(client, name="env-x", id="b-1", type="terraform", options={"size": "m"})

        r = await client.put("/api/v1/services", json={"name": "env-x", "credentials": {"k": "v"}})
        assert r.status_code == 200
        data = r.json()
        assert data["credentials"] == {"k": "v"}
        assert data["options"] == {"size": "m"}

        r = await client.post("/api/v1/services/get", json={"name": "env-x"})
        assert r.json()["credentials"] == {"k": "v"}
        assert r.json()["options"] == {"size": "m"}
        assert r.json()["status"] == "in_progress"

    async def test_set_unknown_service(self, client):
        r = await client.put("/api/v1/services", json={"name": "missing", "options": {}})
        assert r.status_code == 404

    async def test_delete(self, client):
        await _create(client, name="env-x", id="b-1", type="terraform")

        r = await client.post("/api/v1/services/delete", json={"id": "b-1"})
        assert r.status_code == 200
        assert r.json() == {"deleted": "env-x"}

        r = await client.post("/api/v1/services/find", json={"name": "env-x"})
        assert r.json() == []

    async def test_delete_unknown(self, client):
        r = await client.post("/api/v1/services/delete", json={"name": "missing"})
        assert r.status_code == 404


async def test_health(client):
    r = await client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.json()["service"] == "service-store"


async def test_readiness(client):
    r = await client.get("/api/v1/health/ready")
    assert r.status_code == 200
    assert r.json()["checks"]["database"] == "ok"
