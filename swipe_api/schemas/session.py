from typing import Optional

from .common import CamelModel, Identifier, SuccessResponse


class EnsureSessionRequest(CamelModel):
    session_id: Optional[Identifier] = None


class SessionResponse(SuccessResponse):
    session_id: str
