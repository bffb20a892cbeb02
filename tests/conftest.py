"""Shared fixtures: both storage backends, a room, and an API client."""

import pytest
from fastapi.testclient import TestClient

from swipe_api.core.config import Settings
from swipe_api.core.database import create_db_engine, create_session_factory
from swipe_api.crud import InMemoryAnswerStore, SqlAnswerStore
from swipe_api.crud.rooms import create_room
from swipe_api.main import create_app
from swipe_api.models import Base


# =============================================================================
# Stores
# =============================================================================


@pytest.fixture
def memory_store():
    return InMemoryAnswerStore()


@pytest.fixture
def sql_store(tmp_path):
    """SQL backend on a throwaway SQLite file (a file, so threads share it)."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'swipe.db'}")
    Base.metadata.create_all(bind=engine)
    yield SqlAnswerStore(create_session_factory(engine))
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Every store-level test runs against both backends."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def room(store):
    return create_room(store, title="Room One", code="ROOM01")


@pytest.fixture
def other_room(store):
    return create_room(store, title="Room Two", code="ROOM02")


# =============================================================================
# API
# =============================================================================


@pytest.fixture
def test_settings():
    return Settings(STORAGE_BACKEND="memory", SEED_TEST_ROOM=True, TEST_ROOM_CODE="TEST01")


@pytest.fixture
def client(store, test_settings):
    app = create_app(settings=test_settings, store=store)
    with TestClient(app) as c:
        yield c
