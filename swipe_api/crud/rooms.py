# swipe_api/crud/rooms.py
import logging
import secrets
from typing import Optional

from swipe_api.core.errors import PersistenceError
from swipe_api.crud.store import AnswerStore
from swipe_api.schemas import RoomOut

logger = logging.getLogger("uvicorn")

ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 6
MAX_CODE_ATTEMPTS = 10


def generate_id() -> str:
    """12-character url-safe id."""
    return secrets.token_urlsafe(9)


def generate_room_code() -> str:
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


def normalize_room_code(code: Optional[str]) -> Optional[str]:
    if code is None:
        return None
    code = code.strip().upper()
    return code or None


def resolve_room(
    store: AnswerStore,
    room_id: Optional[str] = None,
    room_code: Optional[str] = None,
    active_only: bool = True,
) -> Optional[RoomOut]:
    """
    Map a room id or a human-entered room code to a room.

    The id wins when both are given. Unknown rooms resolve to None, and so do
    closed ones unless active_only is off (results stay readable after close).
    """
    room = None
    room_id = (room_id or "").strip()
    code = normalize_room_code(room_code)

    if room_id:
        room = store.get_room(room_id)
    elif code:
        room = store.get_room_by_code(code)

    if room is None or (active_only and not room.is_active):
        return None
    return room


def create_room(store: AnswerStore, title: str, set_id: str = "default", allow_insights: bool = True, code: Optional[str] = None) -> RoomOut:
    """Create a room, drawing fresh codes until one is free (unless a code is forced)."""
    if code is not None:
        return store.create_room(generate_id(), normalize_room_code(code), title, set_id, allow_insights)

    for _ in range(MAX_CODE_ATTEMPTS):
        candidate = generate_room_code()
        if store.get_room_by_code(candidate) is not None:
            continue
        try:
            room = store.create_room(generate_id(), candidate, title, set_id, allow_insights)
        except PersistenceError:
            # a concurrent create took the code between the check and the insert
            if store.get_room_by_code(candidate) is None:
                raise
            logger.warning(f"⚠️ Room code {candidate} was taken concurrently, drawing another")
            continue
        logger.info(f"🏠 Created room {room.code} ({room.title})")
        return room

    raise PersistenceError("Could not allocate a free room code")


def ensure_test_room(store: AnswerStore, code: str) -> RoomOut:
    """Seed the local test room once; reopened rooms are left as they are."""
    code = normalize_room_code(code)
    existing = store.get_room_by_code(code)
    if existing is not None:
        return existing
    try:
        return create_room(store, title="Test Room", code=code)
    except PersistenceError:
        # another worker seeded it first
        existing = store.get_room_by_code(code)
        if existing is None:
            raise
        return existing
