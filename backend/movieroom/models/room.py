from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WireModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class ChatMessage(WireModel):
    id: str
    username: str
    user_id: str
    text: str
    timestamp: datetime = Field(default_factory=utcnow)


class Reaction(WireModel):
    id: str
    emoji: str
    timestamp: float # Movie position in seconds
    username: str
    user_id: str
    created_at: datetime = Field(default_factory=utcnow)


class PollOption(WireModel):
    text: str
    votes: List[str] = []


class Poll(WireModel):
    id: str
    question: str
    options: List[PollOption]
    created_by: str
    created_at: datetime = Field(default_factory=utcnow)


class Room(WireModel):
    id: str
    movie_link: str
    name: str = 'Untitled Room'
    genre_tag: str = 'General'
    poster_image: Optional[str] = None # Reserved
    is_private: bool = False
    password: Optional[str] = None
    members: List[str] = [] # Session ids in join order
    host_id: Optional[str] = None
    messages: List[ChatMessage] = []
    reactions: List[Reaction] = []
    sync_time: float = 0.0
    is_playing: bool = True # Host auto-plays on arrival
    created_at: datetime = Field(default_factory=utcnow)
    next_entry_id: int = 1

    @property
    def member_count(self) -> int:
        return len(self.members)

    def allocate_id(self) -> str:
        entry_id = str(self.next_entry_id)
        self.next_entry_id += 1
        return entry_id
