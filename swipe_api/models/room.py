from datetime import datetime
from typing import Optional
from sqlalchemy import Boolean, String, DateTime, func, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column
from swipe_api.models.base import Base

class Room(Base):
    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("code", name="uq_rooms_code"),
        Index("idx_rooms_code_active", "code", "is_active"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    code: Mapped[str] = mapped_column(String(16), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    set_id: Mapped[str] = mapped_column(String(64), nullable=False, default="default")
    allow_insights: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
