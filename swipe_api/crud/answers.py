# swipe_api/crud/answers.py
"""
Answer operations used by the HTTP layer.

Each call resolves the room first; nothing is written for a room that does not
resolve. Writes are idempotent so a client can retry any failed request.
"""

from typing import Any, Dict, List, Optional

from swipe_api.core.errors import RoomNotFound, ValidationError
from swipe_api.crud.rooms import resolve_room
from swipe_api.crud.store import ANSWER_VALUES, AnswerStore
from swipe_api.schemas import IDENTIFIER_MAX_LENGTH


def _require(value: Optional[str], field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{field} is required")
    if len(value) > IDENTIFIER_MAX_LENGTH:
        raise ValidationError(f"{field} must be at most {IDENTIFIER_MAX_LENGTH} characters")
    return value


def _require_answer(value: Optional[str]) -> str:
    if value not in ANSWER_VALUES:
        raise ValidationError("answer must be 'yes' or 'no'")
    return value


def submit_answer(
    store: AnswerStore,
    session_id: Optional[str],
    scenario_id: Optional[str],
    answer: Optional[str],
    room_id: Optional[str] = None,
    room_code: Optional[str] = None,
) -> Optional[str]:
    """Record (or change) a session's answer. Returns the answer it replaced."""
    session_id = _require(session_id, "sessionId")
    scenario_id = _require(scenario_id, "scenarioId")
    answer = _require_answer(answer)

    room = resolve_room(store, room_id, room_code)
    if room is None:
        raise RoomNotFound()

    return store.record_answer(session_id, room.id, scenario_id, answer)


def undo_answer(
    store: AnswerStore,
    session_id: Optional[str],
    scenario_id: Optional[str],
    room_id: Optional[str] = None,
    room_code: Optional[str] = None,
) -> Optional[str]:
    """Remove a session's answer. Returns the removed value, None if there was nothing to undo."""
    session_id = _require(session_id, "sessionId")
    scenario_id = _require(scenario_id, "scenarioId")

    room = resolve_room(store, room_id, room_code)
    if room is None:
        raise RoomNotFound()

    return store.retract_answer(session_id, room.id, scenario_id)


def list_answers(
    store: AnswerStore,
    session_id: Optional[str],
    room_id: Optional[str] = None,
    room_code: Optional[str] = None,
) -> List[Dict[str, str]]:
    session_id = _require(session_id, "sessionId")

    room = resolve_room(store, room_id, room_code, active_only=False)
    if room is None:
        raise RoomNotFound()

    return store.get_session_answers(session_id, room.id)


def compute_percentages(aggregates: Dict[str, Dict[str, int]]) -> Dict[str, Dict[str, int]]:
    """Whole-number yes/no shares per scenario; the two always add up to 100 (or both 0)."""
    percentages = {}
    for scenario_id, counts in aggregates.items():
        total = counts["yes"] + counts["no"]
        if total == 0:
            percentages[scenario_id] = {"yes": 0, "no": 0}
            continue
        yes = round(counts["yes"] * 100 / total)
        percentages[scenario_id] = {"yes": yes, "no": 100 - yes}
    return percentages


def read_aggregates(
    store: AnswerStore,
    room_id: Optional[str] = None,
    room_code: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Counts for the results screen.

    With a room: that room's counters and its distinct participants.
    Without one: every room summed per scenario (demo mode).
    """
    if room_id or room_code:
        room = resolve_room(store, room_id, room_code, active_only=False)
        if room is None:
            raise RoomNotFound()
        scope = room.id
    else:
        scope = None

    aggregates = store.get_aggregates(scope)
    return {
        "aggregates": aggregates,
        "total_participants": store.count_participants(scope),
        "percentages": compute_percentages(aggregates),
    }
