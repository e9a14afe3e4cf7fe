"""Structural types for the collaborators this library drives but does not implement.

The node client (REST + websocket to a Lavalink-compatible server) and the voice gateway
(Discord voice state handling) are provided by the host application. Anything that matches
these protocols can be handed to :class:`pycadence.core.client.Client`.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from pycadence.enums.node import NodeState
from pycadence.type_hints.dict_typing import JSON_DICT_TYPE


@runtime_checkable
class NodeRest(Protocol):
    async def resolve(self, identifier: str) -> JSON_DICT_TYPE | None:
        """Load tracks for an identifier, returning the raw load result"""
        ...


@runtime_checkable
class Node(Protocol):
    name: str
    state: NodeState
    penalties: float
    rest: NodeRest


@runtime_checkable
class NodePlayer(Protocol):
    """The per-guild player object of the node client."""

    guild_id: int
    node: Node
    paused: bool
    volume: int
    position: int
    filters: JSON_DICT_TYPE

    async def play_track(self, *, track: str, options: JSON_DICT_TYPE | None = None) -> None:
        ...

    async def stop_track(self) -> None:
        ...

    async def seek_to(self, position: int) -> None:
        ...

    async def set_paused(self, paused: bool) -> None:
        ...

    async def set_global_volume(self, volume: int) -> None:
        ...

    async def set_filter_volume(self, volume: float) -> None:
        ...

    async def set_equalizer(self, bands: list[JSON_DICT_TYPE]) -> None:
        ...

    async def set_karaoke(self, karaoke: JSON_DICT_TYPE | None) -> None:
        ...

    async def set_timescale(self, timescale: JSON_DICT_TYPE | None) -> None:
        ...

    async def set_tremolo(self, tremolo: JSON_DICT_TYPE | None) -> None:
        ...

    async def set_vibrato(self, vibrato: JSON_DICT_TYPE | None) -> None:
        ...

    async def set_rotation(self, rotation: JSON_DICT_TYPE | None) -> None:
        ...

    async def set_distortion(self, distortion: JSON_DICT_TYPE | None) -> None:
        ...

    async def set_channel_mix(self, channel_mix: JSON_DICT_TYPE | None) -> None:
        ...

    async def set_low_pass(self, low_pass: JSON_DICT_TYPE | None) -> None:
        ...

    async def set_filters(self, filters: JSON_DICT_TYPE) -> None:
        ...

    async def move(self, name: str | None = None) -> bool:
        ...

    def on(self, event: str, listener: Callable[[Any], Any]) -> None:
        ...

    def off(self, event: str, listener: Callable[[Any], Any]) -> None:
        ...


@runtime_checkable
class VoiceConnection(Protocol):
    guild_id: int
    channel_id: int | None
    shard_id: int
    deafened: bool
    muted: bool

    def set_deaf(self, deaf: bool = True) -> None:
        ...

    def set_mute(self, mute: bool = True) -> None:
        ...


@runtime_checkable
class VoiceGateway(Protocol):
    nodes: Mapping[str, Node]
    connections: Mapping[int, VoiceConnection]

    async def join_voice_channel(
        self,
        *,
        guild_id: int,
        channel_id: int,
        shard_id: int,
        deaf: bool,
        mute: bool,
        node: Node,
    ) -> NodePlayer:
        ...

    async def leave_voice_channel(self, guild_id: int) -> None:
        ...

    def send_packet(self, shard_id: int, payload: JSON_DICT_TYPE, important: bool = False) -> None:
        ...
