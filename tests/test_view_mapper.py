"""Tests for payload decoding and stored-service lookup."""

import json

import pytest

from service_store.errors.exceptions import DecodeError
from service_store.models.service import ServiceView
from service_store.services.lifecycle import save_service
from service_store.services.view_mapper import decode_view, find_stored, load_from_input


def _payload(**fields) -> bytes:
    return json.dumps(fields).encode()


class TestDecode:
    def test_wire_fields(self):
        view = decode_view(_payload(
            id="b-1",
            user_id=3,
            datacenter_id=7,
            name="env-x",
            type="terraform",
            options={"a": 1},
            credentials={"b": 2},
            definition="def",
            mapping={"c": 3},
            ids=["b-1", "b-2"],
            names=["env-x"],
        ))
        assert view.uuid == "b-1"
        assert view.user_id == 3
        assert view.datacenter_id == 7
        assert view.options == {"a": 1}
        assert view.ids == ["b-1", "b-2"]
        assert view.names == ["env-x"]

    def test_unknown_keys_are_ignored(self):
        view = decode_view(_payload(name="env-x", colour="blue"))
        assert view.name == "env-x"

    def test_caller_cannot_set_identity(self):
        view = decode_view(_payload(name="env-x", row_id=12, _row_id=12))
        assert not view.has_id()

    @pytest.mark.parametrize("body", [b"", b"{not json", b"[1, 2]", b'"text"'])
    def test_malformed_payload_raises(self, body):
        with pytest.raises(DecodeError) as exc_info:
            decode_view(body)
        assert exc_info.value.code == "DECODE_ERROR"
        assert exc_info.value.status_code == 400

    def test_wrong_field_type_raises(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_view(_payload(name="env-x", datacenter_id="seven"))
        assert exc_info.value.details[0]["loc"] == ["datacenter_id"]

    def test_overlay_keeps_absent_fields(self):
        base = ServiceView.from_stored(5, name="env-x", options={"keep": True}, credentials={"old": 1})
        view = decode_view(_payload(credentials={"new": 2}), base=base)

        assert view.options == {"keep": True}
        assert view.credentials == {"new": 2}
        assert view.name == "env-x"
        assert view.has_id()


class TestLoadFromInput:
    @pytest.fixture
    async def stored(self, session_factory):
        await save_service(session_factory, ServiceView(name="env-x", uuid="b-1", type="terraform"))
        await save_service(session_factory, ServiceView(name="env-shell"))

    async def test_by_uuid(self, stored, db_session):
        view = await load_from_input(db_session, _payload(id="b-1", name="ignored"))
        assert view is not None
        assert view.has_id()
        assert view.name == "env-x"

    async def test_by_name(self, stored, db_session):
        view = await load_from_input(db_session, _payload(name="env-x"))
        assert view.uuid == "b-1"

    async def test_stored_view_replaces_request_fields(self, stored, db_session):
        view = await load_from_input(db_session, _payload(name="env-x", datacenter_id=99))
        assert view.datacenter_id == 0

    async def test_unknown_uuid(self, stored, db_session):
        assert await load_from_input(db_session, _payload(id="nope")) is None

    async def test_environment_without_builds(self, stored, db_session):
        assert await load_from_input(db_session, _payload(name="env-shell")) is None

    async def test_no_key(self, stored, db_session):
        assert await find_stored(db_session, ServiceView(datacenter_id=1)) is None

    async def test_malformed_payload_raises(self, db_session):
        with pytest.raises(DecodeError):
            await load_from_input(db_session, b"{")
