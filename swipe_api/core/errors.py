# swipe_api/core/errors.py
"""
Error taxonomy for the answer service.

Every error carries the HTTP status it is surfaced with; the handlers
registered in main.py render them as {"success": false, "error": ...}.
"""


class SwipeError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SwipeError):
    """Missing or malformed session id, scenario id or answer value."""
    status_code = 400


class RoomNotFound(SwipeError):
    """roomId / roomCode does not resolve to an active room."""
    status_code = 404

    def __init__(self, message: str = "Room not found"):
        super().__init__(message)


class PersistenceError(SwipeError):
    """The storage backend is unavailable or a write failed. Safe to retry."""
    status_code = 500
