"""Domain records owned by the room store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Language(str, Enum):
    EN = "en"
    SQ = "sq"
    ES = "es"
    DE = "de"


class RoomStatus(str, Enum):
    WAITING = "waiting"
    PLAYING = "playing"


@dataclass(frozen=True)
class Room:
    code: str
    host_id: str
    language: Language
    status: RoomStatus
    word: str | None
    imposter_id: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Player:
    id: int
    session_id: str
    room_code: str
    name: str
    is_host: bool


@dataclass(frozen=True)
class RoomView:
    """Room projection for one viewer, safe to serialize."""

    room: Room
    players: list[Player]
    me: Player | None

    @property
    def player_count(self) -> int:
        return len(self.players)
