"""Resolve the requesting player from a session token."""

from __future__ import annotations

from typing import Sequence

from .models import Player, Room


def resolve_viewer(room: Room, players: Sequence[Player], session_token: str | None) -> Player | None:
    """Return the player behind ``session_token``, or None for unknown viewers.

    A token that matches no roster entry but equals the room's host id
    falls back to the player flagged as host.
    """
    if not session_token:
        return None

    for player in players:
        if player.session_id == session_token:
            return player

    if session_token == room.host_id:
        for player in players:
            if player.is_host:
                return player
    return None
