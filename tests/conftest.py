from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from pycadence.config.options import ClientOptions, SkipSpamLimits
from pycadence.core.client import Client
from pycadence.enums.node import NodeState
from pycadence.players.rate_limit import RateLimit
from pycadence.players.tracks.obj import Track

GUILD_ID = 1234567890
VOICE_ID = 1111
TEXT_ID = 2222


def raw_track(
    identifier: str,
    *,
    title: str | None = None,
    author: str = "Artist",
    length: int = 180_000,
    source: str = "youtube",
    uri: str | None = None,
    encoded: str | None = None,
    is_stream: bool = False,
    plugin_info: dict | None = None,
) -> dict[str, Any]:
    """A Lavalink v4 track object."""
    return {
        "encoded": encoded or f"encoded-{identifier}",
        "info": {
            "identifier": identifier,
            "isSeekable": not is_stream,
            "author": author,
            "length": length,
            "isStream": is_stream,
            "position": 0,
            "title": title or f"Song {identifier}",
            "uri": uri or f"https://www.youtube.com/watch?v={identifier}",
            "sourceName": source,
            "artworkUrl": None,
            "isrc": None,
        },
        "pluginInfo": plugin_info or {},
        "userData": {},
    }


def search_payload(*tracks: dict[str, Any]) -> dict[str, Any]:
    return {"loadType": "search", "data": list(tracks)}


def make_track(identifier: str, **kwargs: Any) -> Track:
    return Track.from_raw(raw_track(identifier, **kwargs))


class FakeClock:
    """A millisecond clock tests move by hand."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeNode:
    def __init__(self, name: str, *, penalties: float = 0.0, state: NodeState = NodeState.CONNECTED) -> None:
        self.name = name
        self.penalties = penalties
        self.state = state
        self.rest = MagicMock()
        self.rest.resolve = AsyncMock(return_value=search_payload())


class FakeNodePlayer:
    """Records the calls made to the node and lets tests fire node events."""

    def __init__(self, guild_id: int, node: FakeNode) -> None:
        self.guild_id = guild_id
        self.node = node
        self.paused = False
        self.volume = 100
        self.position = 0
        self.filters: dict[str, Any] = {}
        self.listeners: dict[str, list] = {}
        for name in (
            "play_track",
            "stop_track",
            "seek_to",
            "set_paused",
            "set_global_volume",
            "set_filter_volume",
            "set_equalizer",
            "set_karaoke",
            "set_timescale",
            "set_tremolo",
            "set_vibrato",
            "set_rotation",
            "set_distortion",
            "set_channel_mix",
            "set_low_pass",
            "set_filters",
        ):
            setattr(self, name, AsyncMock(return_value=None))
        self.move = AsyncMock(return_value=True)

    def on(self, event: str, listener) -> None:
        self.listeners.setdefault(event, []).append(listener)

    def off(self, event: str, listener) -> None:
        self.listeners.get(event, []).remove(listener)

    def emit(self, event: str, data: Any = None) -> None:
        for listener in list(self.listeners.get(event, [])):
            listener(data)

    def played(self) -> list[str]:
        """The encoded tracks sent to ``play_track``, in order."""
        return [call.kwargs["track"] for call in self.play_track.await_args_list]


class FakeConnection:
    def __init__(self, guild_id: int, channel_id: int, shard_id: int, deafened: bool, muted: bool) -> None:
        self.guild_id = guild_id
        self.channel_id = channel_id
        self.shard_id = shard_id
        self.deafened = deafened
        self.muted = muted

    def set_deaf(self, deaf: bool = True) -> None:
        self.deafened = deaf

    def set_mute(self, mute: bool = True) -> None:
        self.muted = mute


class FakeGateway:
    def __init__(self, *nodes: FakeNode) -> None:
        self.nodes = {node.name: node for node in nodes}
        self.connections: dict[int, FakeConnection] = {}
        self.node_players: dict[int, FakeNodePlayer] = {}
        self.register_connections = True
        self.join_calls = 0
        self.leave_voice_channel = AsyncMock(side_effect=self._leave)
        self.send_packet = MagicMock()

    async def join_voice_channel(
        self, *, guild_id: int, channel_id: int, shard_id: int, deaf: bool, mute: bool, node: FakeNode
    ) -> FakeNodePlayer:
        self.join_calls += 1
        node_player = FakeNodePlayer(guild_id, node)
        self.node_players[guild_id] = node_player
        if self.register_connections:
            self.connections[guild_id] = FakeConnection(guild_id, channel_id, shard_id, deaf, mute)
        return node_player

    async def _leave(self, guild_id: int) -> None:
        self.connections.pop(guild_id, None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def node() -> FakeNode:
    return FakeNode("main")


@pytest.fixture
def gateway(node: FakeNode) -> FakeGateway:
    return FakeGateway(node)


@pytest.fixture
def options() -> ClientOptions:
    return ClientOptions(
        default_search_engine="youtube",
        source_force_resolve=(),
        exceptions=RateLimit(window=10_000, maximum=3),
        stuck=RateLimit(window=10_000, maximum=3),
        resolve_errors=RateLimit(window=10_000, maximum=3),
        skip_spam=SkipSpamLimits(
            attempts=RateLimit(window=5_000, maximum=5),
            destroy=RateLimit(window=60_000, maximum=3),
            cooldown=0,
        ),
        remote_timeout=None,
    )


@pytest.fixture
def client(gateway: FakeGateway, options: ClientOptions, clock: FakeClock) -> Client:
    return Client(gateway, options, clock=clock)


@pytest_asyncio.fixture
async def player(client: Client):
    player = await client.create_player(GUILD_ID, VOICE_ID, TEXT_ID)
    yield player
    if not player.is_destroyed:
        await player.sequencer.wait_until_idle()


@pytest.fixture
def node_player(player, gateway: FakeGateway) -> FakeNodePlayer:
    return gateway.node_players[GUILD_ID]


@pytest.fixture
def events(client: Client) -> list:
    """Every event dispatched through the client, in order."""
    from pycadence.events.base import CadenceEvent

    received: list = []
    client.add_listener(CadenceEvent, received.append)
    return received
