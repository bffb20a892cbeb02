# File: swipe_api/models/__init__.py
from .base import Base
from .room import Room
from .session import UserSession
from .answer import UserAnswer
from .aggregate import RoomAggregate

__all__ = [
    "Base",
    "Room",
    "UserSession",
    "UserAnswer",
    "RoomAggregate",
]
