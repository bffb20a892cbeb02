from typing import Optional
from fastapi import APIRouter, Depends, Query, Request

from swipe_api.crud import AnswerStore
from swipe_api.crud import answers as answers_crud
from swipe_api.schemas import AggregatesResponse

router = APIRouter()

def get_store(request: Request) -> AnswerStore:
    return request.app.state.store

@router.get("/aggregates", response_model=AggregatesResponse)
def get_aggregates(
    room_id: Optional[str] = Query(None, alias="roomId"),
    room_code: Optional[str] = Query(None, alias="roomCode"),
    store: AnswerStore = Depends(get_store),
):
    """
    Yes/no counts per scenario plus distinct participants.

    Without roomId/roomCode the counts of every room are summed (demo mode).
    """
    return AggregatesResponse(**answers_crud.read_aggregates(store, room_id=room_id, room_code=room_code))
