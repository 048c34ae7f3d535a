"""Configuration helpers for backend runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class BackendSettings:
    host: str
    port: int
    min_players: int
    room_ttl_seconds: float | None
    log_level: str


def load_settings() -> BackendSettings:
    port_raw = os.getenv("IMPOSTER_PORT", "8000")
    min_players_raw = os.getenv("IMPOSTER_MIN_PLAYERS", "3")
    ttl_raw = os.getenv("IMPOSTER_ROOM_TTL_SECONDS")
    return BackendSettings(
        host=os.getenv("IMPOSTER_HOST", "127.0.0.1"),
        port=int(port_raw),
        min_players=int(min_players_raw),
        room_ttl_seconds=float(ttl_raw) if ttl_raw else None,
        log_level=os.getenv("IMPOSTER_LOG_LEVEL", "INFO").upper(),
    )
