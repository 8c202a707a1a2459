import logging
import uuid
from typing import Dict, Iterable, List, Optional, Set

from movieroom.config import MAX_ROOM_LIST_LIMIT
from movieroom.errors import ValidationError
from movieroom.models.api import CreateRoomRequest
from movieroom.models.room import Room

logger = logging.getLogger(__name__)


class RoomRegistry:
    """In-memory table of rooms for this process.

    Ids are never handed out twice, even after the room they named is gone.
    """

    def __init__(self):
        self.rooms: Dict[str, Room] = {}
        self._issued_ids: Set[str] = set()

    def _new_id(self) -> str:
        while True:
            room_id = str(uuid.uuid4())[:8]
            if room_id not in self._issued_ids:
                self._issued_ids.add(room_id)
                return room_id

    def create_room(self, config: CreateRoomRequest) -> Room:
        movie_link = (config.movie_link or "").strip()
        if not movie_link:
            raise ValidationError("Movie link is required")
        if config.is_private and not config.password:
            raise ValidationError("Password is required for private rooms")

        room = Room(
            id=self._new_id(),
            movie_link=movie_link,
            name=(config.room_name or "").strip() or "Untitled Room",
            genre_tag=(config.genre_tag or "").strip() or "General",
            poster_image=config.poster_image or None,
            is_private=config.is_private,
            password=config.password if config.is_private else None,
        )
        self.rooms[room.id] = room
        logger.info(f"Room created: {room.id} - {room.name}")
        return room

    def get_room(self, room_id: str) -> Optional[Room]:
        if not isinstance(room_id, str):
            return None
        return self.rooms.get(room_id)

    def list_public_rooms(self, limit: int = MAX_ROOM_LIST_LIMIT) -> List[Room]:
        limit = max(1, min(limit, MAX_ROOM_LIST_LIMIT))
        # Newest insertion first so equal timestamps still list newest-first
        public = [r for r in reversed(self.rooms.values()) if not r.is_private]
        public.sort(key=lambda r: r.created_at, reverse=True)
        return public[:limit]

    def delete_room(self, room_id: str) -> None:
        if self.rooms.pop(room_id, None) is not None:
            logger.info(f"Deleting empty room: {room_id}")

    def seed(self, samples: Iterable[dict]) -> List[Room]:
        created = []
        for sample in samples:
            created.append(self.create_room(CreateRoomRequest.model_validate(sample)))
        logger.info(f"Seeded {len(created)} sample rooms")
        return created

    def __len__(self) -> int:
        return len(self.rooms)
