"""Backend package for the imposter party game."""

from .config import BackendSettings, load_settings
from .errors import JoinRejected, RoomError, RoomNotFound, StartRejected
from .models import Language, Player, Room, RoomStatus, RoomView
from .security import generate_token, token_fingerprint
from .store import InMemoryRoomStore, RoomStore
from .view import IMPOSTER_WORD, build_room_view, sanitize_room
from .words import get_random_word

__all__ = [
    "BackendSettings",
    "build_room_view",
    "generate_token",
    "get_random_word",
    "IMPOSTER_WORD",
    "InMemoryRoomStore",
    "JoinRejected",
    "Language",
    "load_settings",
    "Player",
    "Room",
    "RoomError",
    "RoomNotFound",
    "RoomStatus",
    "RoomStore",
    "RoomView",
    "sanitize_room",
    "StartRejected",
    "token_fingerprint",
]
