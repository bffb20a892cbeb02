# swipe_api/schemas/__init__.py
from .common import (
    AnswerValue,
    IDENTIFIER_MAX_LENGTH,
    CamelModel,
    SuccessResponse,
    ErrorResponse,
)

from .answer import (
    SubmitAnswerRequest,
    SessionAnswer,
    SessionAnswersResponse,
)

from .aggregate import (
    YesNoCounts,
    AggregatesResponse,
)

from .room import (
    RoomOut,
    CreateRoomRequest,
    RoomResponse,
    RoomListResponse,
)

from .session import (
    EnsureSessionRequest,
    SessionResponse,
)
