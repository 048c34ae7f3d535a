"""Per-viewer projections of room state."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from .models import Player, Room, RoomStatus, RoomView
from .session import resolve_viewer

IMPOSTER_WORD = "IMPOSTER"


def sanitize_room(room: Room, viewer_session: str | None) -> Room:
    """Mask secret round fields for one viewer.

    The imposter comparison runs against the unsanitized room before any
    field is cleared. ``imposter_id`` never leaves the server, and a viewer
    who is the imposter, or who could not be identified, gets
    ``IMPOSTER_WORD`` instead of the secret word.
    """
    if room.status is not RoomStatus.PLAYING:
        return replace(room, word=None, imposter_id=None)

    is_imposter = viewer_session is None or viewer_session == room.imposter_id
    word = IMPOSTER_WORD if is_imposter else room.word
    return replace(room, word=word, imposter_id=None)


def build_room_view(room: Room, players: Sequence[Player], session_token: str | None) -> RoomView:
    me = resolve_viewer(room, players, session_token)
    viewer_session = me.session_id if me is not None else None
    return RoomView(room=sanitize_room(room, viewer_session), players=list(players), me=me)
