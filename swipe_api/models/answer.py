from datetime import datetime
from sqlalchemy import Integer, String, DateTime, func, ForeignKey, UniqueConstraint, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column
from swipe_api.models.base import Base

class UserAnswer(Base):
    __tablename__ = "user_answers"
    __table_args__ = (
        UniqueConstraint("session_id", "room_id", "scenario_id", name="uq_user_answers_session_room_scenario"),
        CheckConstraint("answer IN ('yes', 'no')", name="ck_user_answers_answer"),
        Index("idx_user_answers_room", "room_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(ForeignKey("user_sessions.id", ondelete="CASCADE"), nullable=False)
    room_id: Mapped[str] = mapped_column(ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False)
    scenario_id: Mapped[str] = mapped_column(String(128), nullable=False)
    answer: Mapped[str] = mapped_column(String(3), nullable=False)
    answered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
