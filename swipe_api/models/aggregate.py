from datetime import datetime
from sqlalchemy import Integer, String, DateTime, func, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from swipe_api.models.base import Base

class RoomAggregate(Base):
    """Running yes/no counts per (room, scenario), kept in step with user_answers."""
    __tablename__ = "room_aggregates"
    __table_args__ = (
        UniqueConstraint("room_id", "scenario_id", name="uq_room_aggregates_room_scenario"),
        CheckConstraint("yes_count >= 0 AND no_count >= 0", name="ck_room_aggregates_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_id: Mapped[str] = mapped_column(ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False)
    scenario_id: Mapped[str] = mapped_column(String(128), nullable=False)
    yes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    no_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
