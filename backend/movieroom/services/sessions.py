from typing import Dict, Optional

from movieroom.config import MAX_USERNAME_LENGTH
from movieroom.errors import ValidationError
from movieroom.models.session import Session


def guest_name(sid: str) -> str:
    return f"Guest_{sid[:4]}"


def normalize_username(sid: str, username) -> str:
    if username is None:
        return guest_name(sid)
    if not isinstance(username, str):
        raise ValidationError("Username must be a string")
    username = username.strip()
    if not username:
        return guest_name(sid)
    if len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at most {MAX_USERNAME_LENGTH} characters")
    return username


class SessionManager:
    """Live connections keyed by socket id."""

    def __init__(self):
        self.sessions: Dict[str, Session] = {}

    def open(self, sid: str) -> Session:
        session = Session(id=sid, username=guest_name(sid))
        self.sessions[sid] = session
        return session

    def get(self, sid: str) -> Optional[Session]:
        return self.sessions.get(sid)

    def ensure(self, sid: str) -> Session:
        session = self.sessions.get(sid)
        if session is None:
            session = self.open(sid)
        return session

    def close(self, sid: str) -> Optional[Session]:
        return self.sessions.pop(sid, None)

    def username(self, sid: str) -> str:
        session = self.sessions.get(sid)
        return session.username if session else 'Unknown'

    def __len__(self) -> int:
        return len(self.sessions)
