from __future__ import annotations

from pycadence.events.base import CadenceEvent
from pycadence.events.player import (
    DebugEvent,
    PlayerClosedEvent,
    PlayerCreateEvent,
    PlayerDestroyEvent,
    PlayerEmptyEvent,
    PlayerMovedEvent,
    PlayerRateLimitedEvent,
    PlayerResumedEvent,
    PlayerUpdateEvent,
)
from pycadence.events.queue import QueueUpdatedEvent
from pycadence.events.track import (
    PlayerEndEvent,
    PlayerExceptionEvent,
    PlayerResolveErrorEvent,
    PlayerStartEvent,
    PlayerStuckEvent,
)

__all__ = (
    "CadenceEvent",
    "DebugEvent",
    "PlayerClosedEvent",
    "PlayerCreateEvent",
    "PlayerDestroyEvent",
    "PlayerEmptyEvent",
    "PlayerEndEvent",
    "PlayerExceptionEvent",
    "PlayerMovedEvent",
    "PlayerRateLimitedEvent",
    "PlayerResolveErrorEvent",
    "PlayerResumedEvent",
    "PlayerStartEvent",
    "PlayerStuckEvent",
    "PlayerUpdateEvent",
    "QueueUpdatedEvent",
)
