import logging
from typing import Optional, Tuple

from movieroom.errors import (
    AuthorityViolation,
    InvalidPassword,
    NotInRoom,
    RoomNotFound,
    ValidationError,
)
from movieroom.models.room import ChatMessage, Poll, PollOption, Reaction, Room
from movieroom.models.session import Session
from movieroom.services import sync
from movieroom.services.registry import RoomRegistry
from movieroom.services.sessions import SessionManager, normalize_username

logger = logging.getLogger(__name__)


class RoomCoordinator:
    """Applies membership, chat and playback events to rooms.

    ``sio`` is anything with the ``emit``/``enter_room``/``leave_room``
    coroutines of ``socketio.AsyncServer``. All room state is mutated before
    the first ``await`` of each operation, so a single event loop is enough
    to keep rooms consistent.
    """

    def __init__(self, sio, registry: RoomRegistry, sessions: SessionManager):
        self.sio = sio
        self.registry = registry
        self.sessions = sessions

    # Membership

    async def join(self, sid: str, room_id: str, username=None, password=None) -> Room:
        session = self.sessions.ensure(sid)

        room = self.registry.get_room(room_id)
        if not room:
            logger.warning(f"Room {room_id} not found for join request from {sid}")
            raise RoomNotFound()

        if room.is_private and password != room.password:
            logger.warning(f"Invalid password for room {room_id} from {sid}")
            raise InvalidPassword()

        username = normalize_username(sid, username)

        if session.room_id == room.id:
            # Client retry; nothing changes for the other members
            session.username = username
            await self.sio.emit("roomState", self.snapshot(room, sid), to=sid)
            return room

        if session.room_id is not None:
            await self.leave(sid)
            room = self.registry.get_room(room_id)
            if not room:
                raise RoomNotFound()

        session.username = username
        session.room_id = room.id
        room.members.append(sid)
        if room.host_id is None:
            room.host_id = sid
            logger.info(f"{username} is now the host of room {room.id}")

        joined = {"username": username, "userId": sid, "userCount": room.member_count}
        snapshot = self.snapshot(room, sid)

        await self.sio.enter_room(sid, room.id)
        await self.sio.emit("userJoined", joined, room=room.id, skip_sid=sid)
        await self.sio.emit("roomState", snapshot, to=sid)
        logger.info(f"{username} joined room {room.id}. Total users: {room.member_count}")
        return room

    async def leave(self, sid: str, room_id: Optional[str] = None) -> Optional[Room]:
        session = self.sessions.get(sid)
        if not session or session.room_id is None:
            return None
        if room_id is not None and room_id != session.room_id:
            return None

        current_room_id = session.room_id
        session.room_id = None
        room = self.registry.get_room(current_room_id)
        if not room:
            await self.sio.leave_room(sid, current_room_id)
            return None

        was_host = room.host_id == sid
        if sid in room.members:
            room.members.remove(sid)

        new_host = None
        if was_host:
            # Earliest remaining arrival takes over
            room.host_id = room.members[0] if room.members else None
            new_host = room.host_id

        if not room.members:
            self.registry.delete_room(room.id)

        left = {"username": session.username, "userId": sid, "userCount": room.member_count}

        await self.sio.leave_room(sid, room.id)
        if new_host:
            new_host_username = self.sessions.username(new_host)
            logger.info(f"{new_host_username} is now the host of room {room.id}")
            await self.sio.emit("hostChanged", {
                "newHostId": new_host,
                "newHostUsername": new_host_username,
            }, room=room.id)
        if room.members:
            await self.sio.emit("userLeft", left, room=room.id, skip_sid=sid)
        logger.info(f"{session.username} left room {room.id}")
        return room

    async def disconnect(self, sid: str) -> None:
        await self.leave(sid)
        self.sessions.close(sid)

    def snapshot(self, room: Room, sid: str) -> dict:
        return {
            "roomId": room.id,
            "roomName": room.name,
            "movieLink": room.movie_link,
            "genreTag": room.genre_tag,
            "isPrivate": room.is_private,
            "messages": [m.wire() for m in room.messages],
            "reactions": [r.wire() for r in room.reactions],
            "syncTime": room.sync_time,
            "isPlaying": room.is_playing,
            "userCount": room.member_count,
            "isHost": room.host_id == sid,
            "hostId": room.host_id,
            "users": [
                {"id": member, "username": self.sessions.username(member), "isHost": member == room.host_id}
                for member in room.members
            ],
        }

    def _member(self, sid: str, room_id: str) -> Tuple[Room, Session]:
        room = self.registry.get_room(room_id)
        if not room:
            raise RoomNotFound()
        session = self.sessions.get(sid)
        if not session or session.room_id != room.id or sid not in room.members:
            raise NotInRoom()
        return room, session

    # Chat and reactions

    async def send_message(self, sid: str, room_id: str, text) -> ChatMessage:
        room, session = self._member(sid, room_id)
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Message text is required")

        message = ChatMessage(id=room.allocate_id(), username=session.username, user_id=sid, text=text)
        room.messages.append(message)

        await self.sio.emit("newMessage", message.wire(), room=room.id)
        logger.info(f"[{room.name}] {session.username}: {text}")
        return message

    async def send_reaction(self, sid: str, room_id: str, emoji, timestamp) -> Reaction:
        room, session = self._member(sid, room_id)
        if not isinstance(emoji, str) or not emoji.strip():
            raise ValidationError("Reaction emoji is required")
        if timestamp is None:
            timestamp = room.sync_time
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)) or timestamp < 0:
            raise ValidationError("Reaction timestamp must be a non-negative number")

        reaction = Reaction(
            id=room.allocate_id(),
            emoji=emoji,
            timestamp=timestamp,
            username=session.username,
            user_id=sid,
        )
        room.reactions.append(reaction)

        await self.sio.emit("newReaction", reaction.wire(), room=room.id)
        logger.info(f"[{room.name}] {session.username} reacted {emoji} at {timestamp}s")
        return reaction

    # Playback

    async def sync_movie_state(self, sid: str, room_id: str, current_time, is_playing) -> Room:
        room = self.registry.get_room(room_id)
        if not room:
            raise RoomNotFound()

        # Checked against the live host_id, never a cached copy
        if room.host_id != sid:
            logger.warning(
                f"[{room.name}] {self.sessions.username(sid)} ({sid}) tried to sync but is not host"
            )
            raise AuthorityViolation()

        current_time, is_playing = sync.parse_sync_request(current_time, is_playing)
        room.sync_time = current_time
        room.is_playing = is_playing
        username = self.sessions.username(sid)

        await self.sio.emit(
            "movieStateUpdated",
            sync.state_update(current_time, is_playing, synced_by=username),
            room=room.id,
            skip_sid=sid,
        )
        logger.info(
            f"[{room.name}] Host {username} synced: {'Playing' if is_playing else 'Paused'} at {current_time}s"
        )
        return room

    async def request_sync(self, sid: str, room_id: str) -> dict:
        room, _ = self._member(sid, room_id)
        payload = sync.state_update(room.sync_time, room.is_playing)
        await self.sio.emit("movieStateUpdated", payload, to=sid)
        return payload

    # Polls

    async def create_poll(self, sid: str, room_id: str, question, options) -> Poll:
        room, session = self._member(sid, room_id)
        if not isinstance(question, str) or not question.strip():
            raise ValidationError("Poll question is required")
        if not isinstance(options, list) or any(not isinstance(o, str) or not o.strip() for o in options):
            raise ValidationError("Poll options must be non-empty strings")
        if len(options) < 2:
            raise ValidationError("A poll needs at least two options")

        poll = Poll(
            id=room.allocate_id(),
            question=question,
            options=[PollOption(text=o) for o in options],
            created_by=session.username,
        )
        await self.sio.emit("newPoll", poll.wire(), room=room.id)
        logger.info(f"[{room.name}] {session.username} created poll: {question}")
        return poll

    async def vote_poll(self, sid: str, room_id: str, poll_id, option_index) -> dict:
        room, session = self._member(sid, room_id)
        if not isinstance(poll_id, str) or not poll_id:
            raise ValidationError("Poll id is required")
        if isinstance(option_index, bool) or not isinstance(option_index, int) or option_index < 0:
            raise ValidationError("Option index must be a non-negative integer")

        vote = {"pollId": poll_id, "optionIndex": option_index, "userId": sid, "username": session.username}
        await self.sio.emit("pollVoted", vote, room=room.id)
        return vote
