from datetime import timedelta

import pytest

from movieroom.errors import ValidationError
from movieroom.models.api import CreateRoomRequest
from movieroom.services.seed import SAMPLE_ROOMS


def test_create_room_defaults(make_room):
    room = make_room()

    assert room.id
    assert room.name == "Untitled Room"
    assert room.genre_tag == "General"
    assert room.members == []
    assert room.host_id is None
    assert room.is_playing is True
    assert room.sync_time == 0.0
    assert room.password is None


def test_create_room_requires_movie_link(registry):
    with pytest.raises(ValidationError, match="Movie link is required"):
        registry.create_room(CreateRoomRequest(room_name="No movie"))
    with pytest.raises(ValidationError):
        registry.create_room(CreateRoomRequest(movie_link="   "))
    assert len(registry) == 0


def test_private_room_needs_password(registry):
    with pytest.raises(ValidationError):
        registry.create_room(CreateRoomRequest(movie_link="x", is_private=True))


def test_password_only_kept_for_private_rooms(make_room):
    public = make_room(password="ignored")
    private = make_room(isPrivate=True, password="abc")

    assert public.password is None
    assert private.password == "abc"


def test_room_ids_are_unique_and_never_reused(registry, make_room):
    first = make_room()
    registry.delete_room(first.id)
    ids = {make_room().id for _ in range(50)}

    assert len(ids) == 50
    assert first.id not in ids


def test_get_unknown_room(registry):
    assert registry.get_room("missing") is None
    assert registry.get_room(None) is None


def test_list_public_rooms_newest_first(registry, make_room):
    old = make_room(roomName="old")
    secret = make_room(roomName="secret", isPrivate=True, password="p")
    new = make_room(roomName="new")
    old.created_at = new.created_at - timedelta(hours=1)
    secret.created_at = new.created_at + timedelta(hours=1)

    listed = registry.list_public_rooms()

    assert [r.name for r in listed] == ["new", "old"]


def test_list_public_rooms_is_capped(registry, make_room):
    for i in range(25):
        make_room(roomName=f"room {i}")

    assert len(registry.list_public_rooms()) == 20
    assert len(registry.list_public_rooms(limit=5)) == 5
    assert len(registry.list_public_rooms(limit=500)) == 20
    assert registry.list_public_rooms(limit=3)[0].name == "room 24"


def test_delete_room(registry, make_room):
    room = make_room()
    registry.delete_room(room.id)
    registry.delete_room(room.id)

    assert registry.get_room(room.id) is None


def test_seed_creates_public_sample_rooms(registry):
    rooms = registry.seed(SAMPLE_ROOMS)

    assert len(rooms) == len(SAMPLE_ROOMS)
    assert len(registry.list_public_rooms(limit=20)) == len(SAMPLE_ROOMS)
    assert {r.genre_tag for r in rooms} >= {"Horror", "Comedy"}
