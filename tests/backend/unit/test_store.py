import random
import string
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from imposter.backend.errors import JoinRejected, RoomNotFound, StartRejected
from imposter.backend.models import Language, RoomStatus
from imposter.backend.store import InMemoryRoomStore


class _ScriptedRandom:
    """Hands out scripted code letters and defers everything else to a seeded RNG."""

    def __init__(self, letters: str) -> None:
        self._letters = iter(letters)
        self._fallback = random.Random(7)

    def choice(self, seq):
        if isinstance(seq, str):
            return next(self._letters)
        return self._fallback.choice(seq)


def _store(**kwargs) -> InMemoryRoomStore:
    kwargs.setdefault("rng", random.Random(42))
    return InMemoryRoomStore(**kwargs)


def _room_with_players(store: InMemoryRoomStore, count: int) -> str:
    room, _ = store.create_room(name="Host", language=Language.EN, session_token="tok-0")
    for index in range(1, count):
        store.join_room(code=room.code, name=f"P{index}", session_token=f"tok-{index}")
    return room.code


def test_create_room_returns_four_letter_code_and_host() -> None:
    store = _store()

    room, host = store.create_room(name="Ava", language=Language.EN, session_token="tok-ava")

    assert len(room.code) == 4
    assert all(letter in string.ascii_uppercase for letter in room.code)
    assert room.status is RoomStatus.WAITING
    assert room.host_id == "tok-ava"
    assert host.is_host is True
    assert host.room_code == room.code
    assert store.get_room(room.code) == room


def test_create_room_regenerates_colliding_codes() -> None:
    store = _store(rng=_ScriptedRandom("ABCD" + "ABCD" + "WXYZ"))

    first, _ = store.create_room(name="Ava", language=Language.EN, session_token="tok-1")
    second, _ = store.create_room(name="Ben", language=Language.EN, session_token="tok-2")

    assert first.code == "ABCD"
    assert second.code == "WXYZ"


def test_join_room_appends_players_in_join_order() -> None:
    store = _store()
    code = _room_with_players(store, 3)

    players = store.get_players(code)

    assert [player.session_id for player in players] == ["tok-0", "tok-1", "tok-2"]
    assert [player.is_host for player in players] == [True, False, False]
    assert len({player.id for player in players}) == 3


def test_join_room_is_idempotent_for_known_token() -> None:
    store = _store()
    code = _room_with_players(store, 2)

    _, again = store.join_room(code=code, name="Other", session_token="tok-1")

    assert again.name == "P1"
    assert len(store.get_players(code)) == 2


def test_join_room_accepts_lowercase_codes() -> None:
    store = _store()
    room, _ = store.create_room(name="Ava", language=Language.EN, session_token="tok-0")

    joined, player = store.join_room(code=room.code.lower(), name="Ben", session_token="tok-1")

    assert joined.code == room.code
    assert player.room_code == room.code


def test_join_room_unknown_code_raises_not_found() -> None:
    store = _store()

    with pytest.raises(RoomNotFound):
        store.join_room(code="QQQQ", name="Ben", session_token="tok-1")


def test_join_room_rejects_new_players_while_playing_but_allows_rejoin() -> None:
    store = _store()
    code = _room_with_players(store, 3)
    store.start_game(code)

    with pytest.raises(JoinRejected):
        store.join_room(code=code, name="Late", session_token="tok-late")

    _, player = store.join_room(code=code, name="P2", session_token="tok-2")
    assert player.session_id == "tok-2"
    assert len(store.get_players(code)) == 3


def test_get_room_and_players_for_unknown_code() -> None:
    store = _store()

    with pytest.raises(RoomNotFound):
        store.get_room("NOPE")
    assert store.get_players("NOPE") == []


def test_start_game_sets_word_and_single_imposter() -> None:
    store = _store()
    code = _room_with_players(store, 3)

    room = store.start_game(code)

    tokens = [player.session_id for player in store.get_players(code)]
    assert room.status is RoomStatus.PLAYING
    assert room.word
    assert tokens.count(room.imposter_id) == 1
    assert store.get_room(code) == room


def test_start_game_with_too_few_players_leaves_room_unchanged() -> None:
    store = _store()
    code = _room_with_players(store, 2)
    before = store.get_room(code)

    with pytest.raises(StartRejected):
        store.start_game(code)

    assert store.get_room(code) == before
    assert store.get_room(code).status is RoomStatus.WAITING


def test_min_players_is_configurable() -> None:
    store = _store(min_players=2)
    code = _room_with_players(store, 2)

    assert store.start_game(code).status is RoomStatus.PLAYING


def test_start_game_uses_injected_word_picker() -> None:
    store = _store(pick_word=lambda language, rng: f"secret-{language.value}")
    room, _ = store.create_room(name="Host", language=Language.SQ, session_token="tok-0")
    for index in range(1, 3):
        store.join_room(code=room.code, name=f"P{index}", session_token=f"tok-{index}")

    assert store.start_game(room.code).word == "secret-sq"


def test_reset_game_clears_round_and_keeps_roster() -> None:
    store = _store()
    code = _room_with_players(store, 3)
    roster_before = store.get_players(code)
    store.start_game(code)

    room = store.reset_game(code)

    assert room.status is RoomStatus.WAITING
    assert room.word is None
    assert room.imposter_id is None
    assert store.get_players(code) == roster_before


def test_start_and_reset_unknown_room_raise_not_found() -> None:
    store = _store()

    with pytest.raises(RoomNotFound):
        store.start_game("NOPE")
    with pytest.raises(RoomNotFound):
        store.reset_game("NOPE")


def test_player_ids_are_unique_across_rooms() -> None:
    store = _store()
    first, host_one = store.create_room(name="Ava", language=Language.EN, session_token="a")
    _, host_two = store.create_room(name="Ben", language=Language.EN, session_token="b")
    _, guest = store.join_room(code=first.code, name="Cleo", session_token="c")

    assert host_one.id < host_two.id < guest.id


def test_concurrent_joins_all_land_in_roster() -> None:
    store = _store()
    room, _ = store.create_room(name="Host", language=Language.EN, session_token="tok-host")

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(
            pool.map(
                lambda index: store.join_room(code=room.code, name=f"P{index}", session_token=f"tok-{index}"),
                range(40),
            )
        )

    players = store.get_players(room.code)
    assert len(players) == 41
    assert len({player.id for player in players}) == 41


def test_prune_idle_rooms_evicts_stale_rooms_only() -> None:
    store = _store()
    stale, _ = store.create_room(name="Ava", language=Language.EN, session_token="a")
    later = datetime.now(timezone.utc) + timedelta(seconds=120)

    assert store.prune_idle_rooms(max_idle_seconds=600, now=later) == []
    evicted = store.prune_idle_rooms(max_idle_seconds=60, now=later)

    assert evicted == [stale.code]
    assert store.room_count() == 0
    with pytest.raises(RoomNotFound):
        store.get_room(stale.code)


def test_mutations_on_an_evicted_room_raise_not_found(monkeypatch) -> None:
    store = _store()
    room, _ = store.create_room(name="Ava", language=Language.EN, session_token="a")
    for index in range(1, 3):
        store.join_room(code=room.code, name=f"P{index}", session_token=f"tok-{index}")
    evicted_entry = store._entry(room.code)
    store.prune_idle_rooms(max_idle_seconds=0, now=datetime.now(timezone.utc) + timedelta(seconds=1))
    # Simulate a caller that looked the room up just before it was evicted.
    monkeypatch.setattr(store, "_entry", lambda code: evicted_entry)

    with pytest.raises(RoomNotFound):
        store.join_room(code=room.code, name="Late", session_token="tok-late")
    with pytest.raises(RoomNotFound):
        store.start_game(room.code)
    with pytest.raises(RoomNotFound):
        store.reset_game(room.code)
    with pytest.raises(RoomNotFound):
        store.get_snapshot(room.code)
    assert len(evicted_entry.players) == 3
    assert evicted_entry.room.status is RoomStatus.WAITING
