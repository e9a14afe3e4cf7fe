from __future__ import annotations

import asyncio
import dataclasses
import functools
import math
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any, Literal

from dacite import DaciteError

from pycadence.enums.player import LoopState, PlayerState
from pycadence.event_dispatcher import LISTENER_TYPE, ListenerRegistry
from pycadence.events.base import CadenceEvent
from pycadence.events.player import (
    DebugEvent,
    PlayerClosedEvent,
    PlayerEmptyEvent,
    PlayerDestroyEvent,
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
from pycadence.exceptions.base import (
    CadenceException,
    InvalidArgumentException,
    InvalidStateException,
    RemoteOperationFailedException,
)
from pycadence.exceptions.node import NoNodeAvailableException
from pycadence.exceptions.player import (
    NoCurrentTrackException,
    PlayerAlreadyInitializedException,
    PlayerDestroyedException,
    TrackNotSeekableException,
)
from pycadence.exceptions.track import TrackNotFoundException, TrackResolveException
from pycadence.filters import (
    ChannelMix,
    Distortion,
    Equalizer,
    Karaoke,
    LowPass,
    Rotation,
    Timescale,
    Tremolo,
    Vibrato,
    Volume,
)
from pycadence.filters.utils import FilterMixin
from pycadence.helpers.time import get_now_utc, now_ms
from pycadence.logging import getLogger
from pycadence.nodes.api.responses.websocket import Closed, PlayerUpdate, TrackEnd, TrackException, TrackStart, TrackStuck
from pycadence.nodes.utils import parse_payload
from pycadence.players.queue import TrackQueue
from pycadence.players.rate_limit import SlidingWindow
from pycadence.players.sequencer import PRIORITY_CONTROL, PRIORITY_NOTIFY, PlaybackSequencer
from pycadence.players.tracks.obj import Track
from pycadence.type_hints.dict_typing import JSON_DICT_TYPE
from pycadence.type_hints.generics import ANY_GENERIC_TYPE

if TYPE_CHECKING:
    import datetime

    from pycadence.core.client import Client
    from pycadence.nodes.protocols import Node, NodePlayer, VoiceConnection

# End reasons after which the next track should start
ADVANCE_REASONS = frozenset({"finished", "loadFailed", "stopped"})

FILTER_TYPES: dict[str, type[FilterMixin]] = {
    "equalizer": Equalizer,
    "karaoke": Karaoke,
    "timescale": Timescale,
    "tremolo": Tremolo,
    "vibrato": Vibrato,
    "rotation": Rotation,
    "distortion": Distortion,
    "channelMix": ChannelMix,
    "lowPass": LowPass,
}


@dataclasses.dataclass(frozen=True, kw_only=True, slots=True)
class PlayOptions:
    replace_current: bool = False
    no_replace: bool = False
    pause: bool | None = None
    start_time: int | None = None
    end_time: int | None = None

    def __post_init__(self) -> None:
        for name in ("start_time", "end_time"):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 0):
                raise InvalidArgumentException(f"{name} must be a positive integer, not {value!r}")

    def to_payload(self) -> JSON_DICT_TYPE:
        payload: JSON_DICT_TYPE = {"noReplace": False}
        if self.pause is not None:
            payload["pause"] = self.pause
        if self.start_time is not None:
            payload["startTime"] = self.start_time
        if self.end_time is not None:
            payload["endTime"] = self.end_time
        return payload


def _finite_number(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidArgumentException(f"{name} must be a number, not {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentException(f"{name} must be a number, not {value!r}") from None
    if not math.isfinite(number):
        raise InvalidArgumentException(f"{name} must be a finite number, not {value!r}")
    return number


class Player:
    """The playback session of a single guild.

    Every operation that changes what is playing (play, skip, stop, destroy and the
    reactions to node events) runs through the player's :class:`PlaybackSequencer`, one at
    a time. Volume, pause, seek and filter changes are validated and forwarded straight to
    the node.

    Players are created with :meth:`pycadence.core.client.Client.create_player`.
    """

    __slots__ = (
        "_client",
        "_node_player",
        "_connection",
        "_guild_id",
        "_text_id",
        "_state",
        "_initialized",
        "_destroy_requested",
        "_loop",
        "_volume",
        "_paused",
        "_current",
        "_track_active",
        "_last_update",
        "_connected_at",
        "_filter_volume",
        "_filters",
        "_clock",
        "_logger",
        "_listeners",
        "_subscriptions",
        "_exceptions",
        "_stuck",
        "_resolve_errors",
        "_skip_attempts",
        "_skip_destroy_triggers",
        "queue",
        "sequencer",
        "data",
    )

    def __init__(
        self,
        client: Client,
        node_player: NodePlayer,
        connection: VoiceConnection,
        *,
        guild_id: int,
        text_id: int | None = None,
        volume: int | None = None,
        data: dict[str, Any] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._client = client
        self._node_player = node_player
        self._connection = connection
        self._guild_id = guild_id
        self._text_id = text_id
        self._state = PlayerState.CONNECTING
        self._initialized = False
        self._destroy_requested = False
        self._loop = LoopState.NONE
        self._volume = client.options.default_volume if volume is None else volume
        self._paused = False
        self._current: Track | None = None
        self._track_active = False
        self._last_update = 0
        self._connected_at: datetime.datetime | None = None
        self._filter_volume = Volume()
        self._filters: dict[str, FilterMixin] = {name: filter_cls.default() for name, filter_cls in FILTER_TYPES.items()}
        self._clock = clock or now_ms
        self._logger = getLogger(f"PyCadence.Player-{guild_id}")
        self._listeners = ListenerRegistry()
        self._subscriptions: list[tuple[str, Callable[[Any], None]]] = []

        options = client.options
        self._exceptions = SlidingWindow(options.exceptions)
        self._stuck = SlidingWindow(options.stuck)
        self._resolve_errors = SlidingWindow(options.resolve_errors)
        self._skip_attempts = SlidingWindow(options.skip_spam.attempts)
        self._skip_destroy_triggers = SlidingWindow(options.skip_spam.destroy)

        self.queue = TrackQueue(on_change=self._on_queue_change)
        self.sequencer = PlaybackSequencer(str(guild_id), on_error=self._on_operation_error)
        self.data: dict[str, Any] = data if data is not None else {}

    def __repr__(self) -> str:
        return (
            f"<Player guild_id={self._guild_id} state={self._state.name} loop={self._loop.name} "
            f"queue={len(self.queue)} current_id={self.queue.current_id}>"
        )

    @property
    def client(self) -> Client:
        return self._client

    @property
    def node_player(self) -> NodePlayer:
        return self._node_player

    @property
    def node(self) -> Node:
        """The node this player is currently on"""
        return self._node_player.node

    @property
    def guild_id(self) -> int:
        return self._guild_id

    @property
    def voice_id(self) -> int | None:
        return self._connection.channel_id

    @property
    def text_id(self) -> int | None:
        return self._text_id

    @property
    def shard_id(self) -> int:
        return self._connection.shard_id

    @property
    def deaf(self) -> bool:
        return self._connection.deafened

    @property
    def mute(self) -> bool:
        return self._connection.muted

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def loop(self) -> LoopState:
        return self._loop

    @property
    def volume(self) -> int:
        return self._volume

    @property
    def filter_volume(self) -> Volume:
        return self._filter_volume

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def current(self) -> Track | None:
        """The track that was last sent to the node and has not ended yet"""
        return self._current

    @property
    def playing(self) -> bool:
        """Whether the node reported the current track as started and the player is not paused"""
        return self._current is not None and self._track_active and not self._paused

    @property
    def position(self) -> int:
        """The last position the node reported for the current track, in milliseconds"""
        return self._current.position if self._current is not None else 0

    @property
    def connected_at(self) -> datetime.datetime | None:
        return self._connected_at

    @property
    def is_destroyed(self) -> bool:
        return self._state in (PlayerState.DESTROYING, PlayerState.DESTROYED)

    @property
    def equalizer(self) -> Equalizer:
        return self._filters["equalizer"]

    @property
    def karaoke(self) -> Karaoke:
        return self._filters["karaoke"]

    @property
    def timescale(self) -> Timescale:
        return self._filters["timescale"]

    @property
    def tremolo(self) -> Tremolo:
        return self._filters["tremolo"]

    @property
    def vibrato(self) -> Vibrato:
        return self._filters["vibrato"]

    @property
    def rotation(self) -> Rotation:
        return self._filters["rotation"]

    @property
    def distortion(self) -> Distortion:
        return self._filters["distortion"]

    @property
    def channel_mix(self) -> ChannelMix:
        return self._filters["channelMix"]

    @property
    def low_pass(self) -> LowPass:
        return self._filters["lowPass"]

    # Events

    def add_listener(self, event_type: type[CadenceEvent], listener: LISTENER_TYPE) -> None:
        """Listen to events of this player only, ``CadenceEvent`` receives every event."""
        self._listeners.add(event_type, listener)

    def remove_listener(self, event_type: type[CadenceEvent], listener: LISTENER_TYPE) -> None:
        self._listeners.remove(event_type, listener)

    def dispatch_event(self, event: CadenceEvent) -> None:
        self._listeners.dispatch(event)
        self._client.dispatch_event(event)

    def _debug(self, message: str) -> None:
        self._logger.debug(message)
        self.dispatch_event(DebugEvent(self, message))

    def _on_queue_change(self) -> None:
        self.dispatch_event(QueueUpdatedEvent(self))

    def _on_operation_error(self, name: str, exc: BaseException) -> None:
        self._debug(f"Operation {name} failed: {exc}")

    # Internals

    def _ensure_alive(self) -> None:
        if self.is_destroyed:
            raise PlayerDestroyedException(f"Player for guild {self._guild_id} has been destroyed")
        if not self._initialized:
            raise InvalidStateException(f"Player for guild {self._guild_id} has not been initialized")

    async def _remote(self, name: str, awaitable: Awaitable[ANY_GENERIC_TYPE]) -> ANY_GENERIC_TYPE:
        """Await a node or gateway call, turning its failures into :class:`RemoteOperationFailedException`."""
        timeout = self._client.options.remote_timeout
        try:
            if timeout is None:
                return await awaitable
            return await asyncio.wait_for(awaitable, timeout)
        except CadenceException:
            raise
        except asyncio.TimeoutError as exc:
            raise RemoteOperationFailedException(f"{name} timed out after {timeout}s") from exc
        except Exception as exc:
            self._logger.debug("%s failed", name, exc_info=True)
            raise RemoteOperationFailedException(f"{name} failed: {exc}") from exc

    def _schedule(
        self, name: str, operation: Callable[[], Awaitable[Any]], priority: int = PRIORITY_CONTROL
    ) -> asyncio.Future | None:
        if self.is_destroyed:
            self._logger.trace("Dropping %s, the player is destroyed", name)
            return None
        return self.sequencer.submit_nowait(name, priority, operation)

    def _admit(self, category: str, window: SlidingWindow, now: float) -> bool:
        if window.allow(now):
            return True
        if window.engage():
            self._logger.warning("Too many %s events, suppressing them for now", category)
            self.dispatch_event(PlayerRateLimitedEvent(self, category))
            self._debug(f"Rate limit reached for {category}, further notifications are suppressed")
        return False

    # Lifecycle

    async def init(self) -> Player:
        """|coro|
        Apply the initial volume and subscribe to the node player's events.

        Raises
        ------
        PlayerAlreadyInitializedException
            If the player was already initialized.
        PlayerDestroyedException
            If the player was destroyed.
        """
        if self.is_destroyed:
            raise PlayerDestroyedException(f"Player for guild {self._guild_id} has been destroyed")
        if self._state is PlayerState.CONNECTED:
            raise PlayerAlreadyInitializedException(f"Player for guild {self._guild_id} is already initialized")
        await self._remote("set_global_volume", self._node_player.set_global_volume(self._volume))
        self._subscriptions = [
            ("start", self._on_track_start),
            ("end", self._on_track_end),
            ("exception", self._on_track_exception),
            ("stuck", self._on_track_stuck),
            ("update", self._on_player_update),
            ("closed", self._on_closed),
            ("resumed", self._on_resumed),
        ]
        for event, listener in self._subscriptions:
            self._node_player.on(event, listener)
        self._initialized = True
        self._state = PlayerState.CONNECTED
        self._connected_at = get_now_utc()
        self._logger.verbose("Initialized on node %s", self.node.name)
        return self

    async def destroy(self) -> None:
        """|coro|
        Tear the player down, leave the voice channel and remove it from the client.

        Raises
        ------
        PlayerDestroyedException
            If the player is already destroyed or being destroyed.
        """
        if self._destroy_requested or self.is_destroyed:
            raise PlayerDestroyedException(f"Player for guild {self._guild_id} is already destroyed")
        self._destroy_requested = True
        await self.sequencer.submit("destroy", PRIORITY_CONTROL, self._destroy)

    async def _destroy(self) -> None:
        if self.is_destroyed:
            return
        self._destroy_requested = True
        self._state = PlayerState.DESTROYING
        self._logger.info("Destroying player")
        try:
            for event, listener in self._subscriptions:
                self._node_player.off(event, listener)
            self._subscriptions.clear()
            self.sequencer.cancel_pending(
                PlayerDestroyedException(f"Player for guild {self._guild_id} has been destroyed")
            )
            self._current = None
            self._track_active = False
            self.queue.splice(0, len(self.queue), allow_current=True)
            self.queue.current_id = 0
            self.data.clear()
            for window in (
                self._exceptions,
                self._stuck,
                self._resolve_errors,
                self._skip_attempts,
                self._skip_destroy_triggers,
            ):
                window.clear()
            try:
                await self._remote(
                    "leave_voice_channel", self._client.gateway.leave_voice_channel(self._guild_id)
                )
            except RemoteOperationFailedException as exc:
                self._logger.error("Failed to leave the voice channel: %s", exc)
                self._logger.debug("Failed to leave the voice channel", exc_info=True)
        finally:
            self._client.player_controller.remove(self._guild_id, self)
            self._state = PlayerState.DESTROYED
        self.dispatch_event(PlayerDestroyEvent(self))
        self._listeners.clear()

    # Playback

    async def play(
        self,
        tracks: Track | Sequence[Track] | None = None,
        *,
        replace_current: bool = False,
        no_replace: bool = False,
        pause: bool | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
    ) -> None:
        """|coro|
        Start playback, optionally putting new tracks at the cursor first.

        Parameters
        ----------
        tracks : Track | Sequence[Track] | None
            Tracks to play now. When a track is already playing they go right after it
            and the first of them replaces it, otherwise they go in front of the current
            queue entry.
        replace_current : bool
            Put the tracks in place of the current queue entry instead of next to it.
        no_replace : bool
            When a track is already playing only queue the tracks after it.
        pause : bool | None
            Start the track paused.
        start_time : int | None
            Where to start, in milliseconds.
        end_time : int | None
            Where to stop, in milliseconds.

        Raises
        ------
        TrackNotFoundException
            If there is nothing to play.
        TrackResolveException
            If the track could not be made playable.
        RemoteOperationFailedException
            If the node refused to play the track.
        """
        self._ensure_alive()
        if tracks is not None:
            tracks = [tracks] if isinstance(tracks, Track) else list(tracks)
            if any(not isinstance(track, Track) for track in tracks):
                raise InvalidArgumentException("Track must be an instance of Track")
        if not tracks and not self.queue.total_size:
            raise TrackNotFoundException("No track is available to play")
        options = PlayOptions(
            replace_current=replace_current,
            no_replace=no_replace,
            pause=pause,
            start_time=start_time,
            end_time=end_time,
        )
        await self.sequencer.submit("play", PRIORITY_CONTROL, functools.partial(self._play, tracks or None, options))

    async def _play(self, tracks: list[Track] | None = None, options: PlayOptions | None = None) -> None:
        self._ensure_alive()
        options = options or PlayOptions()
        queue = self.queue
        if tracks:
            if self._current is not None:
                if options.no_replace:
                    queue.splice(queue.current_id + 1, 0, *tracks)
                    return
                if options.replace_current and queue.current is not None:
                    queue.splice(queue.current_id, 1, *tracks, allow_current=True)
                else:
                    queue.splice(queue.current_id + 1, 0, *tracks)
                    queue.current_id += 1
            elif options.replace_current and queue.current is not None:
                queue.splice(queue.current_id, 1, *tracks, allow_current=True)
            else:
                queue.splice(queue.current_id, 0, *tracks)

        track = queue.current
        if track is None:
            raise TrackNotFoundException("No track is available to play")
        track.attach(self._client)
        try:
            await track.resolve(self)
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            self._schedule("resolveError", functools.partial(self._handle_resolve_error, track, message, self._clock()))
            raise TrackResolveException(f"Failed to resolve {track.search_query!r}: {message}") from exc

        previous = self._current
        self._current = track
        self._track_active = False
        track.position = options.start_time or 0
        try:
            await self._remote("play_track", self._node_player.play_track(track=track.encoded, options=options.to_payload()))
        except RemoteOperationFailedException:
            self._current = previous
            raise
        if options.pause is not None:
            self._paused = options.pause
        self._logger.verbose("Playing %r at position %s of the queue", track.title, queue.current_id)

    async def skip(self) -> None:
        """|coro|
        Move to the next track, following the loop mode.

        Failures to start the next track are reported as debug events, not raised.
        """
        self._ensure_alive()
        await self._submit_skip(self.queue.current_id + 1)

    async def previous(self) -> None:
        """|coro|
        Move back to the previous track.

        Raises
        ------
        InvalidArgumentException
            If there is no previous track.
        """
        self._ensure_alive()
        target = self.queue.current_id - 1
        if not 0 <= target < len(self.queue):
            raise InvalidArgumentException("There is no previous track")
        await self._submit_skip(target)

    async def skipto(self, track_id: int) -> None:
        """|coro|
        Move to the track at ``track_id``.

        Out of range ids are clamped, an id past the end drains the queue.
        """
        self._ensure_alive()
        if isinstance(track_id, bool) or not isinstance(track_id, int):
            raise InvalidArgumentException(f"Track id must be an integer, not {track_id!r}")
        await self._submit_skip(track_id)

    async def _submit_skip(self, track_id: int) -> None:
        await self.sequencer.submit("trackSkip", PRIORITY_CONTROL, functools.partial(self._track_skip, track_id))

    def _next_cursor(self, track_id: int) -> int:
        queue = self.queue
        if self._loop is LoopState.TRACK:
            return queue.current_id
        if self._loop is LoopState.QUEUE and queue.is_end:
            return 0
        if 0 <= track_id < len(queue):
            return track_id
        if track_id >= len(queue):
            return len(queue)
        return len(queue) - 1

    async def _track_skip(self, track_id: int) -> None:
        self._ensure_alive()
        if await self._throttle_skips():
            return
        self.queue.current_id = self._next_cursor(track_id)
        try:
            await self._play()
        except TrackNotFoundException:
            await self._drain()
        except CadenceException as exc:
            self._debug(f"Skip to {self.queue.current_id} failed: {exc}")

    async def _throttle_skips(self) -> bool:
        """Count a skip attempt, pausing or destroying the player when skips come too fast.

        Returns ``True`` when the player destroyed itself.
        """
        limits = self._client.options.skip_spam
        now = self._clock()
        if self._skip_attempts.hit(now) < limits.attempts.maximum:
            return False
        self._skip_attempts.clear()
        if self._skip_destroy_triggers.hit(now) >= limits.destroy.maximum:
            self._logger.warning("Skip spam persisted through %s cooldowns, destroying the player", limits.destroy.maximum)
            self._debug("Skip spam limit reached, destroying the player")
            await self._destroy()
            return True
        self._debug(f"Skip spam detected, cooling down for {limits.cooldown}ms")
        await asyncio.sleep(limits.cooldown / 1000)
        return False

    async def _drain(self) -> None:
        if self._current is not None:
            self._current = None
            self._track_active = False
            try:
                await self._remote("stop_track", self._node_player.stop_track())
            except RemoteOperationFailedException as exc:
                self._debug(f"Failed to stop the last track: {exc}")
        self._schedule("queueEmpty", self._notify_empty, PRIORITY_NOTIFY)

    async def _notify_empty(self) -> None:
        if self.queue.current is None and self._current is None:
            self.dispatch_event(PlayerEmptyEvent(self))

    async def stop(self) -> None:
        """|coro|
        Stop the current track without moving the cursor.
        """
        self._ensure_alive()
        await self.sequencer.submit("stop", PRIORITY_CONTROL, self._stop)

    async def _stop(self) -> None:
        self._ensure_alive()
        if self._current is None:
            return
        self._current = None
        self._track_active = False
        await self._remote("stop_track", self._node_player.stop_track())

    def set_loop(self, loop: LoopState | Literal["none", "track", "queue"] | None = None) -> LoopState:
        """Set the loop mode, or cycle none, queue, track when called without one."""
        self._ensure_alive()
        if loop is None:
            self._loop = self._loop.next()
        else:
            try:
                self._loop = LoopState(loop)
            except ValueError:
                raise InvalidArgumentException(f"Invalid loop mode {loop!r}") from None
        return self._loop

    # Pass-through controls

    async def pause(self, paused: bool = True) -> None:
        """|coro|
        Pause or resume playback, nothing happens when the state would not change or the queue is empty.
        """
        self._ensure_alive()
        paused = bool(paused)
        if paused == self._paused or not self.queue.total_size:
            return
        await self._remote("set_paused", self._node_player.set_paused(paused))
        self._paused = paused

    async def resume(self) -> None:
        await self.pause(False)

    async def seek(self, position: float) -> None:
        """|coro|
        Seek the current track.

        Parameters
        ----------
        position : float
            The position in milliseconds, clamped to the track length.

        Raises
        ------
        NoCurrentTrackException
            If nothing is playing.
        TrackNotSeekableException
            If the current track cannot be seeked.
        InvalidArgumentException
            If the position is not a finite number.
        """
        self._ensure_alive()
        track = self._current
        if track is None:
            raise NoCurrentTrackException("There is no track to seek")
        if not track.is_seekable:
            raise TrackNotSeekableException(f"{track.title!r} is not seekable")
        position = int(max(0.0, min(_finite_number(position, "Position"), float(track.length or 0))))
        await self._remote("seek_to", self._node_player.seek_to(position))
        track.position = position

    async def set_global_volume(self, volume: int) -> None:
        """|coro|
        Set the player volume, from 0 to 1000 where 100 is unchanged.
        """
        self._ensure_alive()
        volume = int(max(0.0, min(_finite_number(volume, "Volume"), 1000.0)))
        await self._remote("set_global_volume", self._node_player.set_global_volume(volume))
        self._volume = volume

    async def set_filter_volume(self, volume: float) -> None:
        """|coro|
        Set the volume filter as a percentage, 100 is unchanged.
        """
        self._ensure_alive()
        try:
            filter_volume = Volume.from_percentage(_finite_number(volume, "Volume"))
        except ValueError as exc:
            raise InvalidArgumentException(str(exc)) from exc
        await self._remote("set_filter_volume", self._node_player.set_filter_volume(filter_volume.get()))
        self._filter_volume = filter_volume

    async def _apply_filter(
        self, name: str, value: FilterMixin | None, setter: Callable[[Any], Awaitable[None]]
    ) -> None:
        self._ensure_alive()
        filter_cls = FILTER_TYPES[name]
        if value is None:
            value = filter_cls.default()
        elif not isinstance(value, filter_cls):
            raise InvalidArgumentException(f"{name} must be a {filter_cls.__name__}, not {type(value).__name__}")
        payload = value.get()
        await self._remote(f"set_{name}", setter(payload if payload or isinstance(value, Equalizer) else None))
        self._filters[name] = value

    async def set_equalizer(self, equalizer: Equalizer | None) -> None:
        await self._apply_filter("equalizer", equalizer, self._node_player.set_equalizer)

    async def set_karaoke(self, karaoke: Karaoke | None) -> None:
        await self._apply_filter("karaoke", karaoke, self._node_player.set_karaoke)

    async def set_timescale(self, timescale: Timescale | None) -> None:
        await self._apply_filter("timescale", timescale, self._node_player.set_timescale)

    async def set_tremolo(self, tremolo: Tremolo | None) -> None:
        await self._apply_filter("tremolo", tremolo, self._node_player.set_tremolo)

    async def set_vibrato(self, vibrato: Vibrato | None) -> None:
        await self._apply_filter("vibrato", vibrato, self._node_player.set_vibrato)

    async def set_rotation(self, rotation: Rotation | None) -> None:
        await self._apply_filter("rotation", rotation, self._node_player.set_rotation)

    async def set_distortion(self, distortion: Distortion | None) -> None:
        await self._apply_filter("distortion", distortion, self._node_player.set_distortion)

    async def set_channel_mix(self, channel_mix: ChannelMix | None) -> None:
        await self._apply_filter("channelMix", channel_mix, self._node_player.set_channel_mix)

    async def set_low_pass(self, low_pass: LowPass | None) -> None:
        await self._apply_filter("lowPass", low_pass, self._node_player.set_low_pass)

    async def set_filters(self, *, volume: Volume | None = None, **filters: FilterMixin | None) -> None:
        """|coro|
        Replace several filters at once with a single node call.

        Filters that are not passed keep their current value, passing ``None`` resets one.
        Keyword names are the node's filter names, for example ``channelMix`` or ``lowPass``.
        """
        self._ensure_alive()
        if unknown := set(filters) - set(FILTER_TYPES):
            raise InvalidArgumentException(f"Unknown filters: {', '.join(sorted(unknown))}")
        updated = dict(self._filters)
        for name, value in filters.items():
            filter_cls = FILTER_TYPES[name]
            if value is None:
                value = filter_cls.default()
            elif not isinstance(value, filter_cls):
                raise InvalidArgumentException(f"{name} must be a {filter_cls.__name__}, not {type(value).__name__}")
            updated[name] = value
        filter_volume = volume if volume is not None else self._filter_volume
        payload: JSON_DICT_TYPE = {"volume": filter_volume.get()}
        for name, value in updated.items():
            if value.changed:
                payload[name] = value.get()
        await self._remote("set_filters", self._node_player.set_filters(payload))
        self._filters = updated
        self._filter_volume = filter_volume

    # Voice state

    def set_voice_channel(self, voice_id: int) -> None:
        """Move the bot to another voice channel of the same guild."""
        self._ensure_alive()
        if isinstance(voice_id, bool) or not isinstance(voice_id, int):
            raise InvalidArgumentException(f"Voice channel id must be an integer, not {voice_id!r}")
        self._state = PlayerState.CONNECTING
        try:
            self._connection.channel_id = voice_id
            self._client.gateway.send_packet(
                self._connection.shard_id,
                {
                    "op": 4,
                    "d": {
                        "guild_id": self._guild_id,
                        "channel_id": voice_id,
                        "self_deaf": self._connection.deafened,
                        "self_mute": self._connection.muted,
                    },
                },
                False,
            )
        finally:
            self._state = PlayerState.CONNECTED
        self._debug(f"Moved to voice channel {voice_id}")

    def sync_voice_id(self, voice_id: int | None) -> None:
        """Record a voice channel change made outside the player, for example by a moderator."""
        self._connection.channel_id = voice_id

    def set_text_channel(self, text_id: int | None) -> None:
        self._ensure_alive()
        self._text_id = text_id

    def set_mute(self, mute: bool = True) -> None:
        self._ensure_alive()
        self._connection.set_mute(mute)

    def set_deaf(self, deaf: bool = True) -> None:
        self._ensure_alive()
        self._connection.set_deaf(deaf)

    async def move(self, node_name: str | None = None) -> bool:
        """|coro|
        Move the player to another node, the least used one when no name is given.

        Raises
        ------
        NoNodeAvailableException
            If the node does not exist or no node is connected.
        """
        self._ensure_alive()
        if node_name is None:
            node_name = (await self._client.get_least_used_node()).name
        elif node_name not in self._client.gateway.nodes:
            raise NoNodeAvailableException(f"There is no node named {node_name!r}")
        moved = bool(await self._remote("move", self._node_player.move(node_name)))
        self._debug(f"Move to node {node_name} {'succeeded' if moved else 'was refused'}")
        return moved

    # Node events, invoked by the node player

    def _parse(self, data_class: type[ANY_GENERIC_TYPE], data: Any) -> ANY_GENERIC_TYPE | None:
        try:
            payload = parse_payload(data_class, data)
        except (DaciteError, TypeError) as exc:
            self._logger.error("Malformed %s payload from the node: %s", data_class.__name__, exc)
            self._logger.debug("Malformed %s payload from the node", data_class.__name__, exc_info=True)
            return None
        if payload is None:
            self._debug(f"Ignoring a {data_class.__name__} event without a payload")
        return payload

    def _on_track_start(self, data: Any = None) -> None:
        payload = self._parse(TrackStart, data) if data is not None else None
        self._schedule("trackStart", functools.partial(self._handle_track_start, payload))

    def _on_track_end(self, data: Any = None) -> None:
        if (payload := self._parse(TrackEnd, data)) is not None:
            self._schedule("trackEnd", functools.partial(self._handle_track_end, payload))

    def _on_track_exception(self, data: Any = None) -> None:
        if (payload := self._parse(TrackException, data)) is not None:
            self._schedule("trackException", functools.partial(self._handle_track_exception, payload, self._clock()))

    def _on_track_stuck(self, data: Any = None) -> None:
        if (payload := self._parse(TrackStuck, data)) is not None:
            self._schedule("trackStuck", functools.partial(self._handle_track_stuck, payload, self._clock()))

    def _on_player_update(self, data: Any = None) -> None:
        if self.is_destroyed:
            return
        if (payload := self._parse(PlayerUpdate, data)) is None:
            return
        if self._current is None:
            self._debug("Player update received without a current track")
            return
        self._current.position = payload.state.position or 0
        self._last_update = payload.state.time
        self.dispatch_event(PlayerUpdateEvent(self, payload))

    def _on_closed(self, data: Any = None) -> None:
        if self.is_destroyed:
            return
        if (payload := self._parse(Closed, data)) is not None:
            self._logger.warning("Voice websocket closed (%s): %s", payload.code, payload.reason)
            self.dispatch_event(PlayerClosedEvent(self, payload))

    def _on_resumed(self, data: Any = None) -> None:
        if self.is_destroyed:
            return
        self.dispatch_event(PlayerResumedEvent(self))

    async def _handle_track_start(self, payload: TrackStart | None) -> None:
        if self._current is None:
            self._debug("Track start received without a current track")
            return
        self._track_active = True
        self._paused = False
        self.dispatch_event(PlayerStartEvent(self, self._current, payload))

    async def _handle_track_end(self, payload: TrackEnd) -> None:
        if payload.reason == "replaced":
            ended = Track.from_raw(payload.track) if payload.track is not None else None
            self.dispatch_event(PlayerEndEvent(self, ended, payload))
            return
        track = self._current
        if track is None:
            self._debug(f"Track end ({payload.reason}) received without a current track")
            return
        self._current = None
        self._track_active = False
        self.dispatch_event(PlayerEndEvent(self, track, payload))
        if self._client.options.skip_on_end and payload.reason in ADVANCE_REASONS:
            self._schedule("trackSkip", functools.partial(self._track_skip, self.queue.current_id + 1))

    async def _handle_track_exception(self, payload: TrackException, now: float) -> None:
        track = self._current
        self._current = None
        self._track_active = False
        if not self._admit("exception", self._exceptions, now):
            return
        self._logger.warning("Track exception (%s): %s", payload.exception.severity, payload.exception.message)
        self.dispatch_event(PlayerExceptionEvent(self, track, payload))
        if self._client.options.skip_on_exception:
            self._schedule("trackSkip", functools.partial(self._track_skip, self.queue.current_id + 1))

    async def _handle_track_stuck(self, payload: TrackStuck, now: float) -> None:
        track = self._current
        self._current = None
        self._track_active = False
        if not self._admit("stuck", self._stuck, now):
            return
        self._logger.warning("Track stuck for %sms", payload.thresholdMs)
        self.dispatch_event(PlayerStuckEvent(self, track, payload))
        if self._client.options.skip_on_stuck:
            self._schedule("trackSkip", functools.partial(self._track_skip, self.queue.current_id + 1))

    async def _handle_resolve_error(self, track: Track, message: str, now: float) -> None:
        if not self._admit("resolve_error", self._resolve_errors, now):
            return
        self._logger.warning("Failed to resolve %r: %s", track.search_query, message)
        self.dispatch_event(PlayerResolveErrorEvent(self, track, message))
        if self._client.options.skip_on_resolve_error:
            self._schedule("trackSkip", functools.partial(self._track_skip, self.queue.current_id + 1))
