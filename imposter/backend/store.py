"""Room store interface and its in-memory implementation."""

from __future__ import annotations

import itertools
import logging
import random
import string
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Protocol

from .engine import WordPicker, new_room, reset_round, start_round, touch
from .errors import JoinRejected, RoomNotFound
from .models import Language, Player, Room, RoomStatus
from .security import token_fingerprint
from .words import get_random_word

logger = logging.getLogger(__name__)

CODE_LENGTH = 4
CODE_ALPHABET = string.ascii_uppercase
CODE_SPACE = len(CODE_ALPHABET) ** CODE_LENGTH
DEFAULT_MIN_PLAYERS = 3


class RoomStore(Protocol):
    def create_room(self, name: str, language: Language, session_token: str) -> tuple[Room, Player]:
        """Create a waiting room with its host player."""

    def join_room(self, code: str, name: str, session_token: str) -> tuple[Room, Player]:
        """Add a guest, or return the existing player for a known token."""

    def get_room(self, code: str) -> Room:
        """Return the stored room or raise RoomNotFound."""

    def get_players(self, code: str) -> list[Player]:
        """Return the roster in join order."""

    def get_snapshot(self, code: str) -> tuple[Room, list[Player]]:
        """Return a room and its roster read together."""

    def start_game(self, code: str) -> Room:
        """Pick imposter and word and move the room to playing."""

    def reset_game(self, code: str) -> Room:
        """Clear the round and move the room back to waiting."""

    def prune_idle_rooms(self, max_idle_seconds: float, now: datetime | None = None) -> list[str]:
        """Drop rooms idle for longer than the limit."""

    def room_count(self) -> int:
        """Number of live rooms."""


@dataclass
class _RoomEntry:
    room: Room
    players: list[Player]
    lock: threading.Lock = field(default_factory=threading.Lock)


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass
class InMemoryRoomStore:
    min_players: int = DEFAULT_MIN_PLAYERS
    rng: random.Random = field(default_factory=random.SystemRandom)
    pick_word: WordPicker = get_random_word

    def __post_init__(self) -> None:
        self._rooms: dict[str, _RoomEntry] = {}
        self._registry_lock = threading.Lock()
        self._player_ids = itertools.count(1)

    def room_count(self) -> int:
        with self._registry_lock:
            return len(self._rooms)

    def create_room(self, name: str, language: Language, session_token: str) -> tuple[Room, Player]:
        with self._registry_lock:
            code = self._generate_code()
            room = new_room(code=code, host_id=session_token, language=Language(language))
            host = Player(
                id=next(self._player_ids),
                session_id=session_token,
                room_code=code,
                name=name,
                is_host=True,
            )
            self._rooms[code] = _RoomEntry(room=room, players=[host])

        logger.info("Created room %s (%s) for host %s", code, room.language.value, token_fingerprint(session_token))
        return room, host

    def join_room(self, code: str, name: str, session_token: str) -> tuple[Room, Player]:
        entry = self._entry(code)
        with entry.lock:
            self._ensure_live(entry)
            for player in entry.players:
                if player.session_id == session_token:
                    logger.debug("Player %s rejoined room %s", player.id, entry.room.code)
                    return entry.room, player

            if entry.room.status is not RoomStatus.WAITING:
                raise JoinRejected(f"Game in room {entry.room.code} has already started")

            player = Player(
                id=self._next_player_id(),
                session_id=session_token,
                room_code=entry.room.code,
                name=name,
                is_host=False,
            )
            entry.players.append(player)
            entry.room = touch(entry.room)
            room = entry.room

        logger.info("Player %s joined room %s (%d players)", player.id, room.code, len(entry.players))
        return room, player

    def get_room(self, code: str) -> Room:
        return self._entry(code).room

    def get_players(self, code: str) -> list[Player]:
        try:
            entry = self._entry(code)
        except RoomNotFound:
            return []
        with entry.lock:
            return list(entry.players)

    def get_snapshot(self, code: str) -> tuple[Room, list[Player]]:
        entry = self._entry(code)
        with entry.lock:
            self._ensure_live(entry)
            return entry.room, list(entry.players)

    def start_game(self, code: str) -> Room:
        entry = self._entry(code)
        with entry.lock:
            self._ensure_live(entry)
            entry.room = start_round(
                entry.room,
                entry.players,
                min_players=self.min_players,
                rng=self.rng,
                pick_word=self.pick_word,
            )
            room = entry.room

        logger.info("Started round in room %s with %d players", room.code, len(entry.players))
        return room

    def reset_game(self, code: str) -> Room:
        entry = self._entry(code)
        with entry.lock:
            self._ensure_live(entry)
            entry.room = reset_round(entry.room)
            room = entry.room

        logger.info("Reset room %s", room.code)
        return room

    def prune_idle_rooms(self, max_idle_seconds: float, now: datetime | None = None) -> list[str]:
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(seconds=max_idle_seconds)
        with self._registry_lock:
            expired = [code for code, entry in self._rooms.items() if entry.room.updated_at < cutoff]
            for code in expired:
                del self._rooms[code]

        if expired:
            logger.info("Evicted %d idle rooms: %s", len(expired), ", ".join(expired))
        return expired

    def _entry(self, code: str) -> _RoomEntry:
        key = normalize_code(code)
        with self._registry_lock:
            entry = self._rooms.get(key)
        if entry is None:
            raise RoomNotFound(key)
        return entry

    def _ensure_live(self, entry: _RoomEntry) -> None:
        # Caller holds entry.lock; the room may have been evicted since lookup.
        with self._registry_lock:
            live = self._rooms.get(entry.room.code) is entry
        if not live:
            raise RoomNotFound(entry.room.code)

    def _next_player_id(self) -> int:
        with self._registry_lock:
            return next(self._player_ids)

    def _generate_code(self) -> str:
        # Caller holds the registry lock.
        if len(self._rooms) >= CODE_SPACE:
            raise RuntimeError("All room codes are in use")
        while True:
            code = "".join(self.rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
            if code not in self._rooms:
                return code
