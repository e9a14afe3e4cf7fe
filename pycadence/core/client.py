from __future__ import annotations

import dataclasses
import functools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from dacite import DaciteError

from pycadence.config.options import ClientOptions
from pycadence.constants.regex import BASIC_URL_REGEX
from pycadence.constants.sources import SOURCE_IDS
from pycadence.enums.node import NodeState
from pycadence.enums.player import SearchResultType
from pycadence.event_dispatcher import LISTENER_TYPE, DispatchManager
from pycadence.events.base import CadenceEvent
from pycadence.events.player import PlayerCreateEvent
from pycadence.exceptions.base import InvalidArgumentException
from pycadence.exceptions.node import NoNodeAvailableException, VoiceConnectionNotFoundException
from pycadence.helpers.time import now_ms
from pycadence.logging import getLogger
from pycadence.nodes.api.responses import rest_api
from pycadence.nodes.api.responses.playlists import Info as PlaylistInfo
from pycadence.nodes.utils import parse_load_result
from pycadence.players.manager import PlayerController
from pycadence.players.player import Player
from pycadence.players.tracks.obj import Track

if TYPE_CHECKING:
    from discord import Client as DiscordClient

    from pycadence.nodes.protocols import Node, VoiceGateway

LOGGER = getLogger("PyCadence.Client")

PLAYER_FACTORY_TYPE = Callable[..., Player]


@dataclasses.dataclass(frozen=True, kw_only=True, slots=True)
class SearchResult:
    """The outcome of a search, with the tracks already wrapped and attached to the client.

    Attributes
    ----------
    type: SearchResultType
        What kind of result the node returned.
    tracks: tuple[Track, ...]
        The tracks found, empty for EMPTY and ERROR results.
    playlist_info: PlaylistInfo | None
        The playlist name and selected track for PLAYLIST results.
    error: str | None
        The node's error message for ERROR results.
    """

    type: SearchResultType
    tracks: tuple[Track, ...] = ()
    playlist_info: PlaylistInfo | None = None
    error: str | None = None

    def __len__(self) -> int:
        return len(self.tracks)


class Client:
    """The entry point of the library.

    Holds the options shared by every player, the gateway giving access to nodes and voice
    connections, the event dispatcher and the registry of players.

    Parameters
    ----------
    gateway : VoiceGateway
        The host application's voice gateway and node client.
    options : ClientOptions | None
        Settings shared by every player, read from the environment when omitted.
    bot : discord.Client | None
        When given, every event is also dispatched on the bot as ``cadence_<event_name>``.
    player_factory : type[Player]
        The class players are built from, a subclass of :class:`Player`.
    clock : Callable[[], float] | None
        A millisecond clock used by the players' rate limits.

    Examples
    --------
    >>> client = Client(gateway, bot=bot)
    >>> player = await client.create_player(guild.id, channel.id)
    >>> result = await client.search("never gonna give you up")
    >>> await player.play(result.tracks[0])
    """

    __slots__ = ("_gateway", "_options", "_bot", "_clock", "_dispatch_manager", "_player_controller")

    def __init__(
        self,
        gateway: VoiceGateway,
        options: ClientOptions | None = None,
        *,
        bot: DiscordClient | None = None,
        player_factory: type[Player] = Player,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._gateway = gateway
        self._options = options or ClientOptions()
        self._bot = bot
        self._clock = clock or now_ms
        self._dispatch_manager = DispatchManager(bot)
        self._player_controller = PlayerController(self, player_factory)

    def __repr__(self) -> str:
        return f"<Client players={len(self._player_controller)} nodes={len(self._gateway.nodes)}>"

    @property
    def options(self) -> ClientOptions:
        return self._options

    @property
    def gateway(self) -> VoiceGateway:
        return self._gateway

    @property
    def bot(self) -> DiscordClient | None:
        return self._bot

    @property
    def dispatch_manager(self) -> DispatchManager:
        return self._dispatch_manager

    @property
    def player_controller(self) -> PlayerController:
        return self._player_controller

    @property
    def players(self) -> dict[int, Player]:
        return self._player_controller.players

    # Events

    def add_listener(self, event_type: type[CadenceEvent], listener: LISTENER_TYPE) -> None:
        """Listen to events of every player, ``CadenceEvent`` receives every event."""
        self._dispatch_manager.add_listener(event_type, listener)

    def remove_listener(self, event_type: type[CadenceEvent], listener: LISTENER_TYPE) -> None:
        self._dispatch_manager.remove_listener(event_type, listener)

    def dispatch_event(self, event: CadenceEvent) -> None:
        self._dispatch_manager.dispatch(event)

    # Players

    async def create_player(
        self,
        guild_id: int,
        voice_id: int,
        text_id: int | None = None,
        *,
        volume: int | None = None,
        deaf: bool = False,
        mute: bool = False,
        shard_id: int | None = None,
        data: dict[str, Any] | None = None,
    ) -> Player:
        """|coro|
        Join the voice channel and create the guild's player, or return the existing one.

        Parameters
        ----------
        guild_id : int
            The guild to create the player for.
        voice_id : int
            The voice channel to join.
        text_id : int | None
            The text channel associated with the player.
        volume : int | None
            The starting volume, the configured default when omitted.
        deaf : bool
            Whether to join self-deafened.
        mute : bool
            Whether to join self-muted.
        shard_id : int | None
            The shard of the guild, computed from the bot when omitted.
        data : dict | None
            Free-form data stored on the player.

        Raises
        ------
        NoNodeAvailableException
            If no node is connected.
        VoiceConnectionNotFoundException
            If the gateway did not register a voice connection for the guild.
        """
        for name, value in (("guild_id", guild_id), ("voice_id", voice_id)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgumentException(f"{name} must be an integer, not {value!r}")
        player, created = await self._player_controller.create(
            guild_id,
            functools.partial(
                self._build_player,
                guild_id,
                voice_id,
                text_id,
                volume=volume,
                deaf=deaf,
                mute=mute,
                shard_id=shard_id,
                data=data,
            ),
        )
        if created:
            self.dispatch_event(PlayerCreateEvent(player))
        return player

    async def _build_player(
        self,
        guild_id: int,
        voice_id: int,
        text_id: int | None,
        *,
        volume: int | None,
        deaf: bool,
        mute: bool,
        shard_id: int | None,
        data: dict[str, Any] | None,
    ) -> Player:
        node = await self.get_least_used_node()
        if shard_id is None:
            shard_id = self._shard_for(guild_id)
        node_player = await self._gateway.join_voice_channel(
            guild_id=guild_id, channel_id=voice_id, shard_id=shard_id, deaf=deaf, mute=mute, node=node
        )
        try:
            if (connection := self._gateway.connections.get(guild_id)) is None:
                raise VoiceConnectionNotFoundException(f"No voice connection was registered for guild {guild_id}")
            player = self._player_controller.default_player_class(
                self,
                node_player,
                connection,
                guild_id=guild_id,
                text_id=text_id,
                volume=volume,
                data=data,
                clock=self._clock,
            )
            await player.init()
        except Exception as exc:
            LOGGER.error("Failed to create the player for guild %s: %s", guild_id, exc)
            LOGGER.debug("Failed to create the player for guild %s", guild_id, exc_info=True)
            try:
                await self._gateway.leave_voice_channel(guild_id)
            except Exception as leave_exc:
                LOGGER.error("Failed to leave the voice channel of guild %s: %s", guild_id, leave_exc)
                LOGGER.debug("Failed to leave the voice channel of guild %s", guild_id, exc_info=True)
            raise
        LOGGER.verbose("Player for guild %s joined %s on node %s", guild_id, voice_id, node.name)
        return player

    def _shard_for(self, guild_id: int) -> int:
        if self._bot is None or not getattr(self._bot, "shard_count", None):
            return 0
        return (guild_id >> 22) % self._bot.shard_count

    def get_player(self, guild_id: int) -> Player | None:
        """Gets the player for the target guild, if there is one."""
        return self._player_controller.get(guild_id)

    async def destroy_player(self, guild_id: int) -> None:
        """|coro|
        Destroys the player for the target guild, nothing happens when there is none.
        """
        await self._player_controller.destroy(guild_id)

    async def shutdown(self) -> None:
        """|coro|
        Destroys every player.
        """
        await self._player_controller.shutdown()

    # Nodes

    async def get_least_used_node(self) -> Node:
        """|coro|
        Returns the connected node with the fewest of this client's players, adjusted by its penalties.

        Raises
        ------
        NoNodeAvailableException
            If no node is connected.
        """
        nodes = [node for node in self._gateway.nodes.values() if node.state == NodeState.CONNECTED]
        if not nodes:
            raise NoNodeAvailableException("No node is connected")

        def score(node: Node) -> float:
            return len(self._player_controller.players_on(node.name)) + node.penalties

        return functools.reduce(lambda a, b: a if score(a) < score(b) else b, nodes)

    # Search

    async def search(
        self,
        query: str,
        *,
        engine: str | None = None,
        requester: Any = None,
        player: Player | None = None,
    ) -> SearchResult:
        """|coro|
        Load tracks for a URL or a search query.

        Parameters
        ----------
        query : str
            A URL, passed to the node as it is, or text to search for.
        engine : str | None
            The source searched for text queries, the configured default when omitted.
        requester : Any
            Stored on every returned track.
        player : Player | None
            When given the search runs on the player's node.

        Returns
        -------
        SearchResult
            The tracks found, or an ERROR result when the node failed.

        Raises
        ------
        NoNodeAvailableException
            If no node is connected.
        """
        if not isinstance(query, str) or not query.strip():
            raise InvalidArgumentException("Query must be a non-empty string")
        engine = engine or self._options.default_search_engine
        if BASIC_URL_REGEX.match(query):
            identifier = query
        else:
            if engine not in SOURCE_IDS:
                raise InvalidArgumentException(f"Unknown search engine {engine!r}, expected one of {', '.join(SOURCE_IDS)}")
            identifier = f"{SOURCE_IDS[engine]}search:{query}"
        node = player.node if player is not None else await self.get_least_used_node()
        try:
            data = await node.rest.resolve(identifier)
        except Exception as exc:
            LOGGER.error("Failed to load %r on node %s: %s", identifier, node.name, exc)
            LOGGER.debug("Failed to load %r on node %s", identifier, node.name, exc_info=True)
            return SearchResult(type=SearchResultType.ERROR, error=str(exc) or exc.__class__.__name__)
        if not data:
            return SearchResult(type=SearchResultType.EMPTY)
        try:
            response = parse_load_result(data)
        except (DaciteError, KeyError, ValueError) as exc:
            LOGGER.error("Node %s returned an unexpected load result for %r: %s", node.name, identifier, exc)
            LOGGER.debug("Node %s returned an unexpected load result", node.name, exc_info=True)
            return SearchResult(type=SearchResultType.ERROR, error=str(exc))
        return self._to_search_result(response, requester)

    def _to_search_result(self, response: rest_api.LoadTrackResponses, requester: Any) -> SearchResult:
        def wrap(tracks) -> tuple[Track, ...]:
            return tuple(Track.from_raw(track, requester=requester).attach(self) for track in tracks)

        match response:
            case rest_api.TrackResponse(data=track):
                return SearchResult(type=SearchResultType.TRACK, tracks=wrap([track]))
            case rest_api.PlaylistResponse(data=playlist):
                return SearchResult(
                    type=SearchResultType.PLAYLIST, tracks=wrap(playlist.tracks), playlist_info=playlist.info
                )
            case rest_api.SearchResponse(data=tracks):
                return SearchResult(type=SearchResultType.SEARCH, tracks=wrap(tracks))
            case rest_api.ErrorResponse(data=error):
                LOGGER.warning("Load failed (%s): %s", error.severity, error.message)
                return SearchResult(type=SearchResultType.ERROR, error=error.message)
            case _:
                return SearchResult(type=SearchResultType.EMPTY)
