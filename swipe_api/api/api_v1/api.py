from fastapi import APIRouter
from swipe_api.api.api_v1 import answers, aggregates
from swipe_api.api.api_v1 import rooms, sessions
from swipe_api.schemas import ErrorResponse


error_responses = {
    400: {"model": ErrorResponse, "description": "Missing or malformed input"},
    404: {"model": ErrorResponse, "description": "Room not found or closed"},
    500: {"model": ErrorResponse, "description": "Storage failure, safe to retry"},
}

api_router = APIRouter(responses=error_responses)

api_router.include_router(answers.router, prefix="", tags=["answers"])
api_router.include_router(aggregates.router, prefix="", tags=["aggregates"])
api_router.include_router(rooms.router, prefix="", tags=["rooms"])
api_router.include_router(sessions.router, prefix="", tags=["sessions"])
