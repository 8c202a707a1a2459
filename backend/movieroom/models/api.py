from datetime import datetime
from typing import List, Optional

from movieroom.models.room import WireModel


class CreateRoomRequest(WireModel):
    movie_link: Optional[str] = None
    room_name: Optional[str] = None
    is_private: bool = False
    password: Optional[str] = None
    genre_tag: Optional[str] = None
    poster_image: Optional[str] = None


class RoomBrief(WireModel):
    id: str
    name: str
    is_private: bool


class CreateRoomResponse(WireModel):
    success: bool = True
    room_id: str
    room: RoomBrief


class RoomInfo(WireModel):
    id: str
    name: str
    is_private: bool
    genre_tag: str
    user_count: int
    movie_link: str


class RoomSummary(WireModel):
    id: str
    name: str
    genre_tag: str
    poster_image: Optional[str] = None
    user_count: int
    created_at: datetime


class RoomList(WireModel):
    rooms: List[RoomSummary]
