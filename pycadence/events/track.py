from __future__ import annotations

from typing import TYPE_CHECKING

from pycadence.events.base import CadenceEvent

if TYPE_CHECKING:
    from pycadence.nodes.api.responses.websocket import TrackEnd, TrackException, TrackStart, TrackStuck
    from pycadence.players.player import Player
    from pycadence.players.tracks.obj import Track


class PlayerStartEvent(CadenceEvent):
    """This event is dispatched when the node starts playing a track.

    Event can be listened to by adding a listener with the name `cadence_player_start_event`.

    Attributes
    ----------
    player: :class:`Player`
        The player that started playing.
    track: :class:`Track`
        The track that started.
    event: :class:`TrackStart`
        The raw event object.
    """

    __slots__ = ("player", "track", "event")

    def __init__(self, player: Player, track: Track, event_object: TrackStart | None) -> None:
        self.player = player
        self.track = track
        self.event = event_object


class PlayerEndEvent(CadenceEvent):
    """This event is dispatched when the node stops playing a track.

    Event can be listened to by adding a listener with the name `cadence_player_end_event`.

    Attributes
    ----------
    player: :class:`Player`
        The player that finished the track.
    track: :class:`Track` | None
        The track that ended, ``None`` when it was replaced before it became current.
    reason: :class:`str`
        Why the track ended.
    event: :class:`TrackEnd`
        The raw event object.
    """

    __slots__ = ("player", "track", "reason", "event")

    def __init__(self, player: Player, track: Track | None, event_object: TrackEnd) -> None:
        self.player = player
        self.track = track
        self.reason = event_object.reason
        self.event = event_object


class PlayerExceptionEvent(CadenceEvent):
    """This event is dispatched when an exception occurs while playing a track.

    Event can be listened to by adding a listener with the name `cadence_player_exception_event`.

    Attributes
    ----------
    player: :class:`Player`
        The player that encountered the exception.
    track: :class:`Track` | None
        The track that encountered the exception.
    message: :class:`str` | None
        The exception message.
    severity: :class:`str`
        The severity of the exception.
    cause: :class:`str` | None
        The cause of the exception.
    event: :class:`TrackException`
        The raw event object.
    """

    __slots__ = ("player", "track", "message", "severity", "cause", "event")

    def __init__(self, player: Player, track: Track | None, event_object: TrackException) -> None:
        self.player = player
        self.track = track
        self.message = event_object.exception.message
        self.severity = event_object.exception.severity
        self.cause = event_object.exception.cause
        self.event = event_object


class PlayerStuckEvent(CadenceEvent):
    """This event is dispatched when the currently playing track is stuck.

    Event can be listened to by adding a listener with the name `cadence_player_stuck_event`.

    Attributes
    ----------
    player: :class:`Player`
        The player that is stuck.
    track: :class:`Track` | None
        The track that is stuck.
    threshold: :class:`int`
        The threshold in milliseconds.
    event: :class:`TrackStuck`
        The raw event object.
    """

    __slots__ = ("player", "track", "threshold", "event")

    def __init__(self, player: Player, track: Track | None, event_object: TrackStuck) -> None:
        self.player = player
        self.track = track
        self.threshold = event_object.thresholdMs
        self.event = event_object


class PlayerResolveErrorEvent(CadenceEvent):
    """This event is dispatched when a track could not be resolved into something playable.

    Event can be listened to by adding a listener with the name `cadence_player_resolve_error_event`.

    Attributes
    ----------
    player: :class:`Player`
        The player that tried to play the track.
    track: :class:`Track`
        The track that failed.
    message: :class:`str`
        Why it failed.
    """

    __slots__ = ("player", "track", "message")

    def __init__(self, player: Player, track: Track, message: str) -> None:
        self.player = player
        self.track = track
        self.message = message
