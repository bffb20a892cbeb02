"""Room resolution and room creation."""

import pytest

from swipe_api.core.errors import PersistenceError
from swipe_api.crud import rooms as rooms_crud
from swipe_api.crud.rooms import (
    ROOM_CODE_ALPHABET,
    create_room,
    ensure_test_room,
    generate_room_code,
    resolve_room,
)


class TestResolveRoom:
    def test_by_id(self, store, room):
        assert resolve_room(store, room_id=room.id).code == "ROOM01"

    def test_by_code_is_case_and_space_insensitive(self, store, room):
        assert resolve_room(store, room_code="  room01 ").id == room.id

    def test_id_wins_over_code(self, store, room, other_room):
        assert resolve_room(store, room_id=room.id, room_code=other_room.code).id == room.id

    def test_unknown_and_missing(self, store, room):
        assert resolve_room(store, room_code="NOPE99") is None
        assert resolve_room(store, room_id="missing") is None
        assert resolve_room(store) is None
        assert resolve_room(store, room_id="  ", room_code="") is None

    def test_closed_room_only_resolves_for_reads(self, store, room):
        closed = store.close_room(room.id)
        assert closed.is_active is False
        assert closed.closed_at is not None

        assert resolve_room(store, room_code=room.code) is None
        assert resolve_room(store, room_code=room.code, active_only=False).id == room.id


class TestCreateRoom:
    def test_generated_code_shape(self):
        for _ in range(50):
            code = generate_room_code()
            assert len(code) == 6
            assert set(code) <= set(ROOM_CODE_ALPHABET)

    def test_skips_taken_codes(self, store, room, monkeypatch):
        codes = iter(["ROOM01", "ROOM01", "FRESH2"])
        monkeypatch.setattr(rooms_crud, "generate_room_code", lambda: next(codes))

        created = create_room(store, title="Another")
        assert created.code == "FRESH2"
        assert created.is_active is True

    def test_gives_up_when_no_code_is_free(self, store, room, monkeypatch):
        monkeypatch.setattr(rooms_crud, "generate_room_code", lambda: "ROOM01")
        with pytest.raises(PersistenceError):
            create_room(store, title="Another")

    def test_list_contains_created_rooms(self, store, room, other_room):
        codes = {r.code for r in store.list_rooms()}
        assert codes == {"ROOM01", "ROOM02"}

    def test_ensure_test_room_is_idempotent(self, store):
        first = ensure_test_room(store, "test01")
        second = ensure_test_room(store, "TEST01")
        assert first.id == second.id
        assert first.code == "TEST01"

    def test_code_taken_by_concurrent_create_is_retried(self, store, monkeypatch):
        codes = iter(["RACE01", "FRESH2"])
        monkeypatch.setattr(rooms_crud, "generate_room_code", lambda: next(codes))
        real_create = store.create_room

        def create_after_rival(room_id, code, *args, **kwargs):
            if code == "RACE01":
                # a second request commits the same code first
                real_create("rival", code, "Rival")
            return real_create(room_id, code, *args, **kwargs)

        monkeypatch.setattr(store, "create_room", create_after_rival)

        created = create_room(store, title="Mine")
        assert created.code == "FRESH2"
        assert store.get_room_by_code("RACE01").id == "rival"

    def test_storage_failure_is_not_retried_as_taken_code(self, store, monkeypatch):
        def broken(*args, **kwargs):
            raise PersistenceError("Storage unavailable, please retry")

        monkeypatch.setattr(store, "create_room", broken)
        with pytest.raises(PersistenceError, match="Storage unavailable"):
            create_room(store, title="Mine")

    def test_ensure_test_room_tolerates_concurrent_seed(self, store, monkeypatch):
        real_create = store.create_room

        def seeded_by_other_worker(room_id, code, *args, **kwargs):
            real_create("other-worker", code, "Test Room")
            return real_create(room_id, code, *args, **kwargs)

        monkeypatch.setattr(store, "create_room", seeded_by_other_worker)

        room = ensure_test_room(store, "TEST01")
        assert room.id == "other-worker"
        assert room.code == "TEST01"
