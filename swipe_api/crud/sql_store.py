# swipe_api/crud/sql_store.py
"""
SQLAlchemy backend (SQLite for local runs, PostgreSQL in deployment).

Counter rows and session rows are created with INSERT ... ON CONFLICT DO NOTHING
and counters move with a single UPDATE, so concurrent writers never work from
an application-side snapshot.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from sqlalchemy import case, delete, func, select, text, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from swipe_api.core.errors import PersistenceError
from swipe_api.crud.store import AnswerStore
from swipe_api.models import Room, RoomAggregate, UserAnswer, UserSession
from swipe_api.schemas import AnswerValue, RoomOut

logger = logging.getLogger("uvicorn")


def _floored(column, delta: int):
    """column + delta, never below zero."""
    return case((column + delta < 0, 0), else_=column + delta)


class SqlAnswerStore(AnswerStore):
    name = "sql"

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    # ---------- Transactions ----------
    @contextmanager
    def transaction(self) -> Iterator[Session]:
        try:
            with self._session_factory() as db:
                with db.begin():
                    yield db
        except SQLAlchemyError as e:
            logger.error(f"❌ Database error: {e}")
            raise PersistenceError("Storage unavailable, please retry") from e

    def _insert(self, db: Session, model):
        """Dialect-specific INSERT that supports ON CONFLICT."""
        dialect = db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(model)
        if dialect == "sqlite":
            return sqlite.insert(model)
        raise PersistenceError(f"Unsupported database dialect: {dialect}")

    # ---------- Session registry ----------
    def ensure_session(self, tx: Session, session_id: str) -> None:
        stmt = self._insert(tx, UserSession).values(id=session_id).on_conflict_do_nothing(
            index_elements=[UserSession.id]
        )
        tx.execute(stmt)

    # ---------- Answers ----------
    def _select_answer(self, tx: Session, session_id: str, room_id: str, scenario_id: str) -> Optional[UserAnswer]:
        return tx.scalar(
            select(UserAnswer)
            .where(
                UserAnswer.session_id == session_id,
                UserAnswer.room_id == room_id,
                UserAnswer.scenario_id == scenario_id,
            )
            .with_for_update()
        )

    def upsert_answer(self, tx: Session, session_id: str, room_id: str, scenario_id: str, value: AnswerValue) -> Optional[AnswerValue]:
        existing = self._select_answer(tx, session_id, room_id, scenario_id)

        if existing is None:
            stmt = self._insert(tx, UserAnswer).values(
                session_id=session_id,
                room_id=room_id,
                scenario_id=scenario_id,
                answer=value,
            ).on_conflict_do_nothing(
                index_elements=[UserAnswer.session_id, UserAnswer.room_id, UserAnswer.scenario_id]
            ).returning(UserAnswer.id)
            if tx.execute(stmt).scalar() is not None:
                return None
            # a concurrent retry inserted the row first; fall through to update it
            existing = self._select_answer(tx, session_id, room_id, scenario_id)

        previous = existing.answer
        tx.execute(
            update(UserAnswer)
            .where(UserAnswer.id == existing.id)
            .values(answer=value, answered_at=func.now())
            .execution_options(synchronize_session=False)
        )
        return previous

    def delete_answer(self, tx: Session, session_id: str, room_id: str, scenario_id: str) -> Optional[AnswerValue]:
        removed = tx.scalar(
            delete(UserAnswer)
            .where(
                UserAnswer.session_id == session_id,
                UserAnswer.room_id == room_id,
                UserAnswer.scenario_id == scenario_id,
            )
            .returning(UserAnswer.answer)
            .execution_options(synchronize_session=False)
        )
        return removed

    # ---------- Aggregates ----------
    def ensure_aggregate(self, tx: Session, room_id: str, scenario_id: str) -> None:
        stmt = self._insert(tx, RoomAggregate).values(
            room_id=room_id,
            scenario_id=scenario_id,
            yes_count=0,
            no_count=0,
        ).on_conflict_do_nothing(
            index_elements=[RoomAggregate.room_id, RoomAggregate.scenario_id]
        )
        tx.execute(stmt)

    def apply_deltas(self, tx: Session, room_id: str, scenario_id: str, yes_delta: int, no_delta: int) -> None:
        tx.execute(
            update(RoomAggregate)
            .where(RoomAggregate.room_id == room_id, RoomAggregate.scenario_id == scenario_id)
            .values(
                yes_count=_floored(RoomAggregate.yes_count, yes_delta),
                no_count=_floored(RoomAggregate.no_count, no_delta),
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )

    # ---------- Readers ----------
    def get_session_answers(self, session_id: str, room_id: str) -> List[Dict[str, str]]:
        with self.transaction() as db:
            rows = db.execute(
                select(UserAnswer.scenario_id, UserAnswer.answer)
                .where(UserAnswer.session_id == session_id, UserAnswer.room_id == room_id)
                .order_by(UserAnswer.answered_at, UserAnswer.id)
            ).all()
        return [{"scenario_id": scenario_id, "answer": answer} for scenario_id, answer in rows]

    def get_aggregates(self, room_id: Optional[str] = None) -> Dict[str, Dict[str, int]]:
        with self.transaction() as db:
            if room_id is not None:
                rows = db.execute(
                    select(RoomAggregate.scenario_id, RoomAggregate.yes_count, RoomAggregate.no_count)
                    .where(RoomAggregate.room_id == room_id)
                ).all()
            else:
                rows = db.execute(
                    select(
                        RoomAggregate.scenario_id,
                        func.sum(RoomAggregate.yes_count),
                        func.sum(RoomAggregate.no_count),
                    ).group_by(RoomAggregate.scenario_id)
                ).all()
        return {scenario_id: {"yes": int(yes or 0), "no": int(no or 0)} for scenario_id, yes, no in rows}

    def count_participants(self, room_id: Optional[str] = None) -> int:
        with self.transaction() as db:
            q = select(func.count(func.distinct(UserAnswer.session_id)))
            if room_id is not None:
                q = q.where(UserAnswer.room_id == room_id)
            return int(db.scalar(q) or 0)

    # ---------- Rooms ----------
    def get_room(self, room_id: str) -> Optional[RoomOut]:
        with self.transaction() as db:
            room = db.get(Room, room_id)
            return RoomOut.model_validate(room) if room else None

    def get_room_by_code(self, code: str) -> Optional[RoomOut]:
        with self.transaction() as db:
            room = db.scalar(select(Room).where(Room.code == code))
            return RoomOut.model_validate(room) if room else None

    def list_rooms(self) -> List[RoomOut]:
        with self.transaction() as db:
            rooms = db.scalars(select(Room).order_by(Room.created_at.desc())).all()
            return [RoomOut.model_validate(r) for r in rooms]

    def create_room(self, room_id: str, code: str, title: str, set_id: str = "default", allow_insights: bool = True) -> RoomOut:
        with self.transaction() as db:
            room = Room(
                id=room_id,
                code=code,
                title=title,
                set_id=set_id,
                allow_insights=allow_insights,
                is_active=True,
            )
            db.add(room)
            db.flush()
            db.refresh(room)
            return RoomOut.model_validate(room)

    def close_room(self, room_id: str) -> Optional[RoomOut]:
        with self.transaction() as db:
            room = db.get(Room, room_id)
            if room is None:
                return None
            if room.is_active:
                room.is_active = False
                room.closed_at = func.now()
            db.flush()
            db.refresh(room)
            return RoomOut.model_validate(room)

    def ping(self) -> bool:
        try:
            with self.transaction() as db:
                db.execute(text("SELECT 1"))
            return True
        except PersistenceError:
            return False
