from fastapi import APIRouter, Depends, Request

from swipe_api.crud import AnswerStore
from swipe_api.crud.rooms import generate_id
from swipe_api.schemas import EnsureSessionRequest, SessionResponse

router = APIRouter()

def get_store(request: Request) -> AnswerStore:
    return request.app.state.store

@router.post("/sessions", response_model=SessionResponse)
def ensure_session(payload: EnsureSessionRequest, store: AnswerStore = Depends(get_store)):
    """Register the client's session id, minting one when the client has none yet."""
    session_id = payload.session_id or generate_id()
    store.register_session(session_id)
    return SessionResponse(session_id=session_id)
