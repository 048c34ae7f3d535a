"""Pure round transitions applied by the store under a room lock."""

from __future__ import annotations

import random
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Sequence

from .errors import StartRejected
from .models import Language, Player, Room, RoomStatus

WordPicker = Callable[[Language, random.Random], str]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def new_room(code: str, host_id: str, language: Language) -> Room:
    now = _now()
    return Room(
        code=code,
        host_id=host_id,
        language=language,
        status=RoomStatus.WAITING,
        word=None,
        imposter_id=None,
        created_at=now,
        updated_at=now,
    )


def start_round(
    room: Room,
    players: Sequence[Player],
    *,
    min_players: int,
    rng: random.Random,
    pick_word: WordPicker,
) -> Room:
    """Pick an imposter and a word; the room is returned in ``playing``."""
    if len(players) < min_players:
        raise StartRejected(f"Need at least {min_players} players to start")

    imposter = rng.choice(list(players))
    word = pick_word(room.language, rng)
    return replace(
        room,
        status=RoomStatus.PLAYING,
        word=word,
        imposter_id=imposter.session_id,
        updated_at=_now(),
    )


def reset_round(room: Room) -> Room:
    return replace(
        room,
        status=RoomStatus.WAITING,
        word=None,
        imposter_id=None,
        updated_at=_now(),
    )


def touch(room: Room) -> Room:
    return replace(room, updated_at=_now())
