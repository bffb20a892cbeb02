from typing import Optional
from fastapi import APIRouter, Depends, Query, Request

from swipe_api.crud import AnswerStore
from swipe_api.crud import answers as answers_crud
from swipe_api.schemas import SubmitAnswerRequest, SuccessResponse, SessionAnswersResponse, SessionAnswer

router = APIRouter()

# ---------- Store dependency ----------
def get_store(request: Request) -> AnswerStore:
    return request.app.state.store

# ---------- Endpoints ----------

@router.post("/answers", response_model=SuccessResponse)
def submit_answer(payload: SubmitAnswerRequest, store: AnswerStore = Depends(get_store)):
    """Record a yes/no answer; resubmitting or switching updates it in place."""
    answers_crud.submit_answer(
        store,
        session_id=payload.session_id,
        scenario_id=payload.scenario_id,
        answer=payload.answer,
        room_id=payload.room_id,
        room_code=payload.room_code,
    )
    return SuccessResponse()


@router.delete("/answers", response_model=SuccessResponse)
def undo_answer(
    session_id: Optional[str] = Query(None, alias="sessionId"),
    scenario_id: Optional[str] = Query(None, alias="scenarioId"),
    room_id: Optional[str] = Query(None, alias="roomId"),
    room_code: Optional[str] = Query(None, alias="roomCode"),
    store: AnswerStore = Depends(get_store),
):
    """Undo an answer. Succeeds even when there was nothing to undo."""
    answers_crud.undo_answer(store, session_id, scenario_id, room_id=room_id, room_code=room_code)
    return SuccessResponse()


@router.get("/answers", response_model=SessionAnswersResponse)
def get_session_answers(
    session_id: Optional[str] = Query(None, alias="sessionId"),
    room_id: Optional[str] = Query(None, alias="roomId"),
    room_code: Optional[str] = Query(None, alias="roomCode"),
    store: AnswerStore = Depends(get_store),
):
    rows = answers_crud.list_answers(store, session_id, room_id=room_id, room_code=room_code)
    return SessionAnswersResponse(answers=[SessionAnswer(**row) for row in rows])
