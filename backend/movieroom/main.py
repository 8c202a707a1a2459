import functools
import logging

import socketio
from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from movieroom.config import ALLOWED_ORIGINS, API_PREFIX, LOG_LEVEL, ROOM_LIST_LIMIT, SEED_ROOMS
from movieroom.errors import RoomError
from movieroom.models.api import (
    CreateRoomRequest,
    CreateRoomResponse,
    RoomBrief,
    RoomInfo,
    RoomList,
    RoomSummary,
)
from movieroom.services.registry import RoomRegistry
from movieroom.services.room import RoomCoordinator
from movieroom.services.seed import SAMPLE_ROOMS
from movieroom.services.sessions import SessionManager

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="MovieRoom")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

sio = socketio.AsyncServer(async_mode='asgi', cors_allowed_origins=ALLOWED_ORIGINS if ALLOWED_ORIGINS != ["*"] else "*")
socket_app = socketio.ASGIApp(sio, app)

# Process-wide state, built once
registry = RoomRegistry()
sessions = SessionManager()
coordinator = RoomCoordinator(sio, registry, sessions)

if SEED_ROOMS:
    registry.seed(SAMPLE_ROOMS)

# REST API
router = APIRouter(prefix=API_PREFIX)


@router.get("/health")
async def health():
    return {"status": "OK", "message": "MovieRoom Server is running"}


@router.post("/rooms/create", status_code=201, response_model=CreateRoomResponse)
async def create_room_endpoint(body: CreateRoomRequest):
    try:
        room = registry.create_room(body)
    except RoomError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return CreateRoomResponse(
        room_id=room.id,
        room=RoomBrief(id=room.id, name=room.name, is_private=room.is_private),
    )


@router.get("/rooms", response_model=RoomList)
async def list_rooms(limit: int = ROOM_LIST_LIMIT):
    rooms = registry.list_public_rooms(limit)
    return RoomList(rooms=[
        RoomSummary(
            id=r.id,
            name=r.name,
            genre_tag=r.genre_tag,
            poster_image=r.poster_image,
            user_count=r.member_count,
            created_at=r.created_at,
        )
        for r in rooms
    ])


@router.get("/rooms/{room_id}", response_model=RoomInfo)
async def get_room_endpoint(room_id: str):
    room = registry.get_room(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return RoomInfo(
        id=room.id,
        name=room.name,
        is_private=room.is_private,
        genre_tag=room.genre_tag,
        user_count=room.member_count,
        movie_link=room.movie_link,
    )


app.include_router(router)


# Socket Events
def on_event(event: str):
    """Register a socket handler that reports failures only to its sender."""
    def decorator(handler):
        @functools.wraps(handler)
        async def wrapper(sid, data=None):
            if not isinstance(data, dict):
                data = {}
            try:
                await handler(sid, data)
            except RoomError as e:
                await sio.emit(e.event, e.payload(), to=sid)
            except Exception as e:
                logger.error(f"Error in {event}: {e}", exc_info=True)
                await sio.emit("roomError", {"message": "Internal server error"}, to=sid)
        sio.on(event, wrapper)
        return wrapper
    return decorator


@sio.event
async def connect(sid, environ):
    sessions.open(sid)
    logger.info(f"Client {sid} connected")


@sio.event
async def disconnect(sid):
    try:
        logger.info(f"Client {sid} disconnected")
        await coordinator.disconnect(sid)
    except Exception as e:
        logger.error(f"Error in disconnect: {e}", exc_info=True)
        sessions.close(sid)


@on_event("joinRoom")
async def join_room(sid, data):
    logger.info(f"Join request: sid={sid}, room={data.get('roomId')}, nick={data.get('username')}")
    await coordinator.join(sid, data.get("roomId"), data.get("username"), data.get("password"))


@on_event("leaveRoom")
async def leave_room(sid, data):
    await coordinator.leave(sid, data.get("roomId"))


@on_event("sendMessage")
async def send_message(sid, data):
    await coordinator.send_message(sid, data.get("roomId"), data.get("text"))


@on_event("sendReaction")
async def send_reaction(sid, data):
    await coordinator.send_reaction(sid, data.get("roomId"), data.get("emoji"), data.get("timestamp"))


@on_event("syncMovieState")
async def sync_movie_state(sid, data):
    await coordinator.sync_movie_state(sid, data.get("roomId"), data.get("currentTime"), data.get("isPlaying"))


@on_event("requestSync")
async def request_sync(sid, data):
    await coordinator.request_sync(sid, data.get("roomId"))


@on_event("createPoll")
async def create_poll(sid, data):
    await coordinator.create_poll(sid, data.get("roomId"), data.get("question"), data.get("options"))


@on_event("votePoll")
async def vote_poll(sid, data):
    await coordinator.vote_poll(sid, data.get("roomId"), data.get("pollId"), data.get("optionIndex"))
