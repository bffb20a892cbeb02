# swipe_api/crud/store.py
"""
Storage contract for answers and their running aggregates.

A backend implements small primitives (session registry, answer upsert/delete,
aggregate adjustment, readers) that all run inside a backend transaction.
record_answer / retract_answer compose them so an answer row and its aggregate
adjustment are applied together or not at all.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any, Dict, List, Optional, Tuple

from swipe_api.schemas import AnswerValue, RoomOut

logger = logging.getLogger("uvicorn")

ANSWER_VALUES = ("yes", "no")


def compute_deltas(previous: Optional[str], new: Optional[str]) -> Tuple[int, int]:
    """
    (yes_delta, no_delta) for a transition previous -> new.

    None on the left is a first answer, None on the right is an undo.
    Equal values give (0, 0).
    """
    for value in (previous, new):
        if value is not None and value not in ANSWER_VALUES:
            raise ValueError(f"Unknown answer value: {value!r}")

    yes_delta = (new == "yes") - (previous == "yes")
    no_delta = (new == "no") - (previous == "no")
    return yes_delta, no_delta


class AnswerStore(ABC):
    """Pluggable backend behind the answer and aggregate endpoints."""

    name: str = "abstract"

    # ---------- Transactions ----------
    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Context manager yielding a transaction handle; commits on exit, rolls back on error."""

    # ---------- Primitives (run inside a transaction) ----------
    @abstractmethod
    def ensure_session(self, tx: Any, session_id: str) -> None:
        """Insert the session if unseen. Never fails on a known id."""

    @abstractmethod
    def upsert_answer(self, tx: Any, session_id: str, room_id: str, scenario_id: str, value: AnswerValue) -> Optional[AnswerValue]:
        """Store value for the triple, bump answered_at, return the value it replaced."""

    @abstractmethod
    def delete_answer(self, tx: Any, session_id: str, room_id: str, scenario_id: str) -> Optional[AnswerValue]:
        """Remove the triple's answer, return its value (None if there was none)."""

    @abstractmethod
    def ensure_aggregate(self, tx: Any, room_id: str, scenario_id: str) -> None:
        """Create the (room, scenario) counter row with zero counts if absent."""

    @abstractmethod
    def apply_deltas(self, tx: Any, room_id: str, scenario_id: str, yes_delta: int, no_delta: int) -> None:
        """Atomically add the deltas, flooring each counter at zero."""

    # ---------- Readers ----------
    @abstractmethod
    def get_session_answers(self, session_id: str, room_id: str) -> List[Dict[str, str]]:
        """[{scenario_id, answer}] for one session in one room."""

    @abstractmethod
    def get_aggregates(self, room_id: Optional[str] = None) -> Dict[str, Dict[str, int]]:
        """{scenario_id: {"yes", "no"}} for a room, or summed across rooms when room_id is None."""

    @abstractmethod
    def count_participants(self, room_id: Optional[str] = None) -> int:
        """Distinct sessions with at least one answer (in the room, or anywhere)."""

    # ---------- Rooms ----------
    @abstractmethod
    def get_room(self, room_id: str) -> Optional[RoomOut]:
        pass

    @abstractmethod
    def get_room_by_code(self, code: str) -> Optional[RoomOut]:
        pass

    @abstractmethod
    def list_rooms(self) -> List[RoomOut]:
        pass

    @abstractmethod
    def create_room(self, room_id: str, code: str, title: str, set_id: str = "default", allow_insights: bool = True) -> RoomOut:
        pass

    @abstractmethod
    def close_room(self, room_id: str) -> Optional[RoomOut]:
        pass

    @abstractmethod
    def ping(self) -> bool:
        """Cheap liveness check for /health."""

    # ---------- Composite operations ----------
    def adjust(self, tx: Any, room_id: str, scenario_id: str, previous: Optional[str], new: Optional[str]) -> Tuple[int, int]:
        """Move the (room, scenario) counters by the previous -> new transition."""
        self.ensure_aggregate(tx, room_id, scenario_id)
        yes_delta, no_delta = compute_deltas(previous, new)
        if yes_delta or no_delta:
            self.apply_deltas(tx, room_id, scenario_id, yes_delta, no_delta)
        return yes_delta, no_delta

    def register_session(self, session_id: str) -> None:
        with self.transaction() as tx:
            self.ensure_session(tx, session_id)

    def record_answer(self, session_id: str, room_id: str, scenario_id: str, value: AnswerValue) -> Optional[AnswerValue]:
        """Upsert one answer and adjust its aggregate in a single transaction."""
        with self.transaction() as tx:
            self.ensure_session(tx, session_id)
            previous = self.upsert_answer(tx, session_id, room_id, scenario_id, value)
            deltas = self.adjust(tx, room_id, scenario_id, previous, value)

        logger.debug(
            f"[answers:{self.name}] session={session_id} room={room_id} scenario={scenario_id} "
            f"{previous} -> {value} deltas={deltas}"
        )
        return previous

    def retract_answer(self, session_id: str, room_id: str, scenario_id: str) -> Optional[AnswerValue]:
        """Undo: delete one answer and decrement its aggregate. No-op when nothing was stored."""
        with self.transaction() as tx:
            removed = self.delete_answer(tx, session_id, room_id, scenario_id)
            if removed is not None:
                self.adjust(tx, room_id, scenario_id, removed, None)

        logger.debug(
            f"[answers:{self.name}] session={session_id} room={room_id} scenario={scenario_id} "
            f"undo removed={removed}"
        )
        return removed
