"""Domain errors raised by the room store and request handlers."""

from __future__ import annotations


class RoomError(Exception):
    """Base class for failures a client is allowed to see."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RoomNotFound(RoomError):
    status_code = 404

    def __init__(self, code: str) -> None:
        super().__init__(f"Room {code} not found")
        self.code = code


class JoinRejected(RoomError):
    status_code = 409


class StartRejected(RoomError):
    status_code = 403
