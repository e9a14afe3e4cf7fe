from __future__ import annotations

import dataclasses
from typing import Literal  # noqa

from pycadence.nodes.api.responses.exceptions import LavalinkException as TrackExceptionClass
from pycadence.nodes.api.responses.player import State
from pycadence.nodes.api.responses.track import Track


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class Message:
    op: str


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class PlayerUpdate(Message):
    op: Literal["playerUpdate"] = "playerUpdate"
    guildId: str | None = None
    state: State


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class TrackStart(Message):
    op: Literal["event"] = "event"
    type: Literal["TrackStartEvent"] = "TrackStartEvent"
    guildId: str | None = None
    track: Track | None = None


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class TrackStuck(Message):
    op: Literal["event"] = "event"
    type: Literal["TrackStuckEvent"] = "TrackStuckEvent"
    guildId: str | None = None
    track: Track | None = None
    thresholdMs: int


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class TrackEnd(Message):
    op: Literal["event"] = "event"
    type: Literal["TrackEndEvent"] = "TrackEndEvent"
    guildId: str | None = None
    track: Track | None = None
    reason: Literal["finished", "loadFailed", "stopped", "replaced", "cleanup"]


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class TrackException(Message):
    op: Literal["event"] = "event"
    type: Literal["TrackExceptionEvent"] = "TrackExceptionEvent"
    guildId: str | None = None
    track: Track | None = None
    exception: TrackExceptionClass


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class Closed(Message):
    op: Literal["event"] = "event"
    type: Literal["WebSocketClosedEvent"] = "WebSocketClosedEvent"
    guildId: str | None = None
    code: int
    reason: str = ""
    byRemote: bool = False
