# swipe_api/crud/memory_store.py
"""
In-process backend for tests and local development.

One lock serializes every transaction. Writes register an undo step in the
transaction journal, so a failure midway leaves the previous state untouched.
"""

import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from swipe_api.core.errors import PersistenceError
from swipe_api.crud.store import AnswerStore
from swipe_api.schemas import AnswerValue, RoomOut

AnswerKey = Tuple[str, str, str]      # (session_id, room_id, scenario_id)
AggregateKey = Tuple[str, str]        # (room_id, scenario_id)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class _Journal:
    def __init__(self):
        self._undo: List[Callable[[], None]] = []

    def on_rollback(self, step: Callable[[], None]) -> None:
        self._undo.append(step)

    def rollback(self) -> None:
        while self._undo:
            self._undo.pop()()


class InMemoryAnswerStore(AnswerStore):
    name = "memory"

    def __init__(self):
        self._lock = threading.RLock()
        self.sessions: Dict[str, datetime] = {}
        # value, answered_at
        self.answers: Dict[AnswerKey, Tuple[str, datetime]] = {}
        # yes_count, no_count
        self.aggregates: Dict[AggregateKey, List[int]] = {}
        self.rooms: Dict[str, RoomOut] = {}

    # ---------- Transactions ----------
    @contextmanager
    def transaction(self) -> Iterator[_Journal]:
        with self._lock:
            journal = _Journal()
            try:
                yield journal
            except BaseException:
                journal.rollback()
                raise

    # ---------- Session registry ----------
    def ensure_session(self, tx: _Journal, session_id: str) -> None:
        if session_id in self.sessions:
            return
        self.sessions[session_id] = _now()
        tx.on_rollback(lambda: self.sessions.pop(session_id, None))

    # ---------- Answers ----------
    def upsert_answer(self, tx: _Journal, session_id: str, room_id: str, scenario_id: str, value: AnswerValue) -> Optional[AnswerValue]:
        key = (session_id, room_id, scenario_id)
        before = self.answers.get(key)
        self.answers[key] = (value, _now())

        if before is None:
            tx.on_rollback(lambda: self.answers.pop(key, None))
            return None

        tx.on_rollback(lambda: self.answers.__setitem__(key, before))
        return before[0]

    def delete_answer(self, tx: _Journal, session_id: str, room_id: str, scenario_id: str) -> Optional[AnswerValue]:
        key = (session_id, room_id, scenario_id)
        before = self.answers.pop(key, None)
        if before is None:
            return None

        tx.on_rollback(lambda: self.answers.__setitem__(key, before))
        return before[0]

    # ---------- Aggregates ----------
    def ensure_aggregate(self, tx: _Journal, room_id: str, scenario_id: str) -> None:
        key = (room_id, scenario_id)
        if key in self.aggregates:
            return
        self.aggregates[key] = [0, 0]
        tx.on_rollback(lambda: self.aggregates.pop(key, None))

    def apply_deltas(self, tx: _Journal, room_id: str, scenario_id: str, yes_delta: int, no_delta: int) -> None:
        counts = self.aggregates[(room_id, scenario_id)]
        before = list(counts)
        counts[0] = max(0, counts[0] + yes_delta)
        counts[1] = max(0, counts[1] + no_delta)
        tx.on_rollback(lambda: counts.__setitem__(slice(None), before))

    # ---------- Readers ----------
    def get_session_answers(self, session_id: str, room_id: str) -> List[Dict[str, str]]:
        with self._lock:
            rows = [
                (answered_at, scenario_id, value)
                for (sid, rid, scenario_id), (value, answered_at) in self.answers.items()
                if sid == session_id and rid == room_id
            ]
        rows.sort(key=lambda r: r[0])
        return [{"scenario_id": scenario_id, "answer": value} for _, scenario_id, value in rows]

    def get_aggregates(self, room_id: Optional[str] = None) -> Dict[str, Dict[str, int]]:
        result: Dict[str, Dict[str, int]] = {}
        with self._lock:
            for (rid, scenario_id), (yes, no) in self.aggregates.items():
                if room_id is not None and rid != room_id:
                    continue
                entry = result.setdefault(scenario_id, {"yes": 0, "no": 0})
                entry["yes"] += yes
                entry["no"] += no
        return result

    def count_participants(self, room_id: Optional[str] = None) -> int:
        with self._lock:
            return len({
                sid for (sid, rid, _) in self.answers
                if room_id is None or rid == room_id
            })

    # ---------- Rooms ----------
    def get_room(self, room_id: str) -> Optional[RoomOut]:
        with self._lock:
            return self.rooms.get(room_id)

    def get_room_by_code(self, code: str) -> Optional[RoomOut]:
        with self._lock:
            return next((r for r in self.rooms.values() if r.code == code), None)

    def list_rooms(self) -> List[RoomOut]:
        with self._lock:
            return sorted(self.rooms.values(), key=lambda r: r.created_at, reverse=True)

    def create_room(self, room_id: str, code: str, title: str, set_id: str = "default", allow_insights: bool = True) -> RoomOut:
        with self._lock:
            if room_id in self.rooms or self.get_room_by_code(code) is not None:
                raise PersistenceError(f"Room {room_id} / {code} already exists")
            room = RoomOut(
                id=room_id,
                code=code,
                title=title,
                set_id=set_id,
                allow_insights=allow_insights,
                is_active=True,
                created_at=_now(),
            )
            self.rooms[room_id] = room
            return room

    def close_room(self, room_id: str) -> Optional[RoomOut]:
        with self._lock:
            room = self.rooms.get(room_id)
            if room is None or not room.is_active:
                return room
            room = room.model_copy(update={"is_active": False, "closed_at": _now()})
            self.rooms[room_id] = room
            return room

    def ping(self) -> bool:
        return True
