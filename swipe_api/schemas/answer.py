from typing import List, Optional

from .common import AnswerValue, CamelModel, Identifier, SuccessResponse


class SubmitAnswerRequest(CamelModel):
    session_id: Identifier
    scenario_id: Identifier
    answer: AnswerValue
    room_id: Optional[str] = None
    room_code: Optional[str] = None


class SessionAnswer(CamelModel):
    scenario_id: str
    answer: AnswerValue


class SessionAnswersResponse(SuccessResponse):
    answers: List[SessionAnswer]
