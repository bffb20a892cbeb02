from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import ConfigDict, StringConstraints

from .common import CamelModel, SuccessResponse


class RoomOut(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    title: str
    set_id: str = "default"
    allow_insights: bool = True
    is_active: bool = True
    created_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None


class CreateRoomRequest(CamelModel):
    title: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
    set_id: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)] = "default"
    allow_insights: bool = True


class RoomResponse(SuccessResponse):
    room: RoomOut


class RoomListResponse(SuccessResponse):
    rooms: List[RoomOut]
