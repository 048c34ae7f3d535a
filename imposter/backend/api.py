"""FastAPI endpoints for room lifecycle, per-viewer state and websocket sync."""

from __future__ import annotations

import json
import logging
from datetime import datetime

from fastapi import Depends, FastAPI, Header, Path, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .config import BackendSettings, load_settings
from .errors import RoomError, StartRejected
from .models import Language, Player, Room, RoomStatus, RoomView
from .notifier import RoomNotifier
from .security import generate_token, token_fingerprint
from .session import resolve_viewer
from .store import InMemoryRoomStore, RoomStore, normalize_code
from .view import build_room_view

logger = logging.getLogger(__name__)

ROOM_CODE_PATTERN = r"^[A-Za-z]{4}$"


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateRoomRequest(BaseModel):
    name: str = Field(min_length=2, max_length=12)
    language: Language


class JoinRoomRequest(BaseModel):
    code: str = Field(pattern=ROOM_CODE_PATTERN)
    name: str = Field(min_length=2, max_length=12)


class SessionResponse(ApiModel):
    code: str
    player_id: str


class RoomPayload(ApiModel):
    code: str
    language: Language
    status: RoomStatus
    word: str | None
    imposter_id: str | None
    created_at: datetime
    updated_at: datetime


class PlayerPayload(ApiModel):
    id: int
    room_code: str
    name: str
    is_host: bool


class RoomViewResponse(ApiModel):
    room: RoomPayload
    players: list[PlayerPayload]
    me: PlayerPayload | None
    player_count: int


class SuccessResponse(BaseModel):
    success: bool


class HealthResponse(BaseModel):
    status: str
    rooms: int


def _room_payload(room: Room) -> RoomPayload:
    return RoomPayload(
        code=room.code,
        language=room.language,
        status=room.status,
        word=room.word,
        imposter_id=room.imposter_id,
        created_at=room.created_at,
        updated_at=room.updated_at,
    )


def _player_payload(player: Player) -> PlayerPayload:
    return PlayerPayload(id=player.id, room_code=player.room_code, name=player.name, is_host=player.is_host)


def _view_response(view: RoomView) -> RoomViewResponse:
    return RoomViewResponse(
        room=_room_payload(view.room),
        players=[_player_payload(player) for player in view.players],
        me=_player_payload(view.me) if view.me is not None else None,
        player_count=view.player_count,
    )


def create_app(
    store: RoomStore | None = None,
    notifier: RoomNotifier | None = None,
    settings: BackendSettings | None = None,
) -> FastAPI:
    app = FastAPI(title="Imposter API", version="0.1.0")
    backend_settings = settings if settings is not None else load_settings()
    room_store = store if store is not None else InMemoryRoomStore(min_players=backend_settings.min_players)
    room_notifier = notifier if notifier is not None else RoomNotifier()
    app.state.notifier = room_notifier
    app.state.store = room_store

    async def publish_change(code: str) -> None:
        room, players = room_store.get_snapshot(code)
        await room_notifier.broadcast(code=room.code, status=room.status.value, player_count=len(players))

    def get_store() -> RoomStore:
        return room_store

    @app.exception_handler(RoomError)
    async def room_error_handler(request: Request, exc: RoomError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {"msg": "Invalid request", "loc": ()}
        loc = first.get("loc") or ()
        field = str(loc[-1]) if loc else None
        return JSONResponse(status_code=400, content={"message": first["msg"], "field": field})

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal Server Error"})

    @app.get("/api/health", response_model=HealthResponse)
    def health(local_store: RoomStore = Depends(get_store)) -> HealthResponse:
        return HealthResponse(status="ok", rooms=local_store.room_count())

    @app.post("/api/rooms", response_model=SessionResponse, status_code=201)
    async def create_room(
        payload: CreateRoomRequest,
        local_store: RoomStore = Depends(get_store),
    ) -> SessionResponse:
        if backend_settings.room_ttl_seconds is not None:
            local_store.prune_idle_rooms(max_idle_seconds=backend_settings.room_ttl_seconds)

        session_token = generate_token()
        room, _ = local_store.create_room(
            name=payload.name,
            language=payload.language,
            session_token=session_token,
        )
        await publish_change(room.code)
        return SessionResponse(code=room.code, player_id=session_token)

    @app.post("/api/rooms/join", response_model=SessionResponse)
    async def join_room(
        payload: JoinRoomRequest,
        x_session_id: str | None = Header(default=None),
        local_store: RoomStore = Depends(get_store),
    ) -> SessionResponse:
        session_token = x_session_id or generate_token()
        room, player = local_store.join_room(
            code=normalize_code(payload.code),
            name=payload.name,
            session_token=session_token,
        )
        await publish_change(room.code)
        return SessionResponse(code=room.code, player_id=player.session_id)

    @app.get("/api/rooms/{code}", response_model=RoomViewResponse)
    def get_room(
        code: str = Path(pattern=ROOM_CODE_PATTERN),
        x_session_id: str | None = Header(default=None),
        local_store: RoomStore = Depends(get_store),
    ) -> RoomViewResponse:
        room, players = local_store.get_snapshot(normalize_code(code))
        return _view_response(build_room_view(room, players, x_session_id))

    @app.post("/api/rooms/{code}/start", response_model=SuccessResponse)
    async def start_game(
        code: str = Path(pattern=ROOM_CODE_PATTERN),
        x_session_id: str | None = Header(default=None),
        local_store: RoomStore = Depends(get_store),
    ) -> SuccessResponse:
        room, players = local_store.get_snapshot(normalize_code(code))
        me = resolve_viewer(room, players, x_session_id)
        if me is None or not me.is_host:
            logger.info("Rejected start of room %s by %s", room.code, token_fingerprint(x_session_id))
            raise StartRejected("Only the host can start the game")

        local_store.start_game(room.code)
        await publish_change(room.code)
        return SuccessResponse(success=True)

    @app.post("/api/rooms/{code}/reset", response_model=SuccessResponse)
    async def reset_game(
        code: str = Path(pattern=ROOM_CODE_PATTERN),
        local_store: RoomStore = Depends(get_store),
    ) -> SuccessResponse:
        room = local_store.reset_game(normalize_code(code))
        await publish_change(room.code)
        return SuccessResponse(success=True)

    @app.websocket("/ws")
    async def room_ws(websocket: WebSocket) -> None:
        await room_notifier.connect(websocket)
        try:
            while True:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    break
                raw = frame.get("text")
                if raw is None:
                    logger.debug("Ignoring binary websocket frame")
                    continue
                try:
                    message = json.loads(raw)
                except json.JSONDecodeError:
                    logger.debug("Ignoring non-JSON websocket message")
                    continue
                room_notifier.handle_message(websocket, message)
        except WebSocketDisconnect:
            pass
        finally:
            room_notifier.disconnect(websocket)

    return app


app = create_app()
