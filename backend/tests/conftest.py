from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

import pytest

from movieroom import main
from movieroom.models.api import CreateRoomRequest
from movieroom.services.registry import RoomRegistry
from movieroom.services.room import RoomCoordinator
from movieroom.services.sessions import SessionManager


@dataclass
class FakeSocketServer:
    """Records what each sid would receive from a socketio.AsyncServer."""

    rooms: Dict[str, Set[str]] = field(default_factory=dict)
    received: Dict[str, List[Dict[str, Any]]] = field(default_factory=lambda: defaultdict(list))

    async def enter_room(self, sid: str, room: str, namespace: Optional[str] = None):
        self.rooms.setdefault(room, set()).add(sid)

    async def leave_room(self, sid: str, room: str, namespace: Optional[str] = None):
        self.rooms.get(room, set()).discard(sid)

    async def emit(self, event, data=None, to=None, room=None, skip_sid=None, namespace=None, **kwargs):
        target = to if to is not None else room
        if target in self.rooms:
            recipients = set(self.rooms[target])
        else:
            recipients = {target}
        for sid in recipients:
            if sid != skip_sid:
                self.received[sid].append({"event": event, "data": data})

    def events(self, sid: str, event: str) -> List[Any]:
        return [e["data"] for e in self.received[sid] if e["event"] == event]

    def event_names(self, sid: str) -> List[str]:
        return [e["event"] for e in self.received[sid]]

    def clear(self):
        self.received.clear()


@pytest.fixture
def fake_sio():
    return FakeSocketServer()


@pytest.fixture
def registry():
    return RoomRegistry()


@pytest.fixture
def sessions():
    return SessionManager()


@pytest.fixture
def coordinator(fake_sio, registry, sessions):
    return RoomCoordinator(fake_sio, registry, sessions)


@pytest.fixture
def make_room(registry):
    def _make(**kwargs):
        kwargs.setdefault("movieLink", "https://example.com/movie")
        return registry.create_room(CreateRoomRequest.model_validate(kwargs))
    return _make


@pytest.fixture
def app_state(monkeypatch, fake_sio):
    """Route the app's socket server through the fake and start from empty state."""
    monkeypatch.setattr(main.sio, "emit", fake_sio.emit)
    monkeypatch.setattr(main.sio, "enter_room", fake_sio.enter_room)
    monkeypatch.setattr(main.sio, "leave_room", fake_sio.leave_room)
    main.registry.rooms.clear()
    main.sessions.sessions.clear()
    yield fake_sio
    main.registry.rooms.clear()
    main.sessions.sessions.clear()
