"""Playback sync payloads and the guest-side drift rule.

The host is the only source of playback state. Guests receive
``movieStateUpdated`` and call :func:`reconcile` against their local player.
"""
import math
import time
from dataclasses import dataclass
from typing import Optional

from movieroom.config import DRIFT_TOLERANCE
from movieroom.errors import ValidationError


def server_time_ms() -> int:
    return int(time.time() * 1000)


def parse_sync_request(current_time, is_playing) -> tuple:
    # bool is an int subclass, so it is rejected explicitly
    if isinstance(current_time, bool) or not isinstance(current_time, (int, float)):
        raise ValidationError("currentTime must be a number", event="syncError")
    if not math.isfinite(current_time) or current_time < 0:
        raise ValidationError("currentTime must be a non-negative number", event="syncError")
    if not isinstance(is_playing, bool):
        raise ValidationError("isPlaying must be a boolean", event="syncError")
    return float(current_time), is_playing


def state_update(current_time: float, is_playing: bool, synced_by: Optional[str] = None) -> dict:
    payload = {
        "currentTime": current_time,
        "isPlaying": is_playing,
        "serverTime": server_time_ms(),
    }
    if synced_by is not None:
        payload["syncedBy"] = synced_by
    return payload


@dataclass
class PlayerAction:
    seek_to: Optional[float]
    is_playing: bool


def reconcile(local_time: float, local_playing: bool, update: dict,
              is_host: bool = False, tolerance: float = DRIFT_TOLERANCE) -> PlayerAction:
    """Decide what a player should do with an incoming state update.

    Play/pause is always adopted. The position is only corrected when the
    drift exceeds ``tolerance`` seconds, so network jitter alone never
    causes a visible seek. The host keeps its own state.
    """
    if is_host:
        return PlayerAction(seek_to=None, is_playing=local_playing)

    target = float(update.get("currentTime", local_time))
    seek_to = target if abs(local_time - target) > tolerance else None
    return PlayerAction(seek_to=seek_to, is_playing=bool(update.get("isPlaying", local_playing)))
