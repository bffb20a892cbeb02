from typing import Optional
from fastapi import APIRouter, Depends, Query, Request

from swipe_api.core.errors import RoomNotFound
from swipe_api.crud import AnswerStore
from swipe_api.crud import rooms as rooms_crud
from swipe_api.schemas import CreateRoomRequest, RoomResponse, RoomListResponse

router = APIRouter()

def get_store(request: Request) -> AnswerStore:
    return request.app.state.store

@router.get("/rooms", response_model=RoomResponse | RoomListResponse)
def get_rooms(
    code: Optional[str] = Query(None, description="Room code as entered by a participant"),
    store: AnswerStore = Depends(get_store),
):
    """Look up an active room by code, or list every room when no code is given."""
    if code is None:
        return RoomListResponse(rooms=store.list_rooms())

    room = rooms_crud.resolve_room(store, room_code=code)
    if room is None:
        raise RoomNotFound()
    return RoomResponse(room=room)


@router.post("/rooms", response_model=RoomResponse)
def create_room(payload: CreateRoomRequest, store: AnswerStore = Depends(get_store)):
    room = rooms_crud.create_room(
        store,
        title=payload.title,
        set_id=payload.set_id,
        allow_insights=payload.allow_insights,
    )
    return RoomResponse(room=room)


@router.post("/rooms/{room_id}/close", response_model=RoomResponse)
def close_room(room_id: str, store: AnswerStore = Depends(get_store)):
    """Deactivate a room; its answers and counts stay readable."""
    room = store.close_room(room_id)
    if room is None:
        raise RoomNotFound()
    return RoomResponse(room=room)
