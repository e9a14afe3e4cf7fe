from __future__ import annotations

from typing import TYPE_CHECKING

from pycadence.events.base import CadenceEvent

if TYPE_CHECKING:
    from pycadence.enums.player import PlayerMovedState
    from pycadence.nodes.api.responses.websocket import Closed, PlayerUpdate
    from pycadence.players.player import Player


class PlayerCreateEvent(CadenceEvent):
    """This event is dispatched when a player is created and initialized.

    Event can be listened to by adding a listener with the name `cadence_player_create_event`.

    Attributes
    ----------
    player: :class:`Player`
        The player that was created.
    """

    __slots__ = ("player",)

    def __init__(self, player: Player) -> None:
        self.player = player


class PlayerDestroyEvent(CadenceEvent):
    """This event is dispatched once a player has been torn down.

    Event can be listened to by adding a listener with the name `cadence_player_destroy_event`.

    Attributes
    ----------
    player: :class:`Player`
        The player that was destroyed.
    """

    __slots__ = ("player",)

    def __init__(self, player: Player) -> None:
        self.player = player


class PlayerEmptyEvent(CadenceEvent):
    """This event is dispatched when the queue has nothing left to play.

    Event can be listened to by adding a listener with the name `cadence_player_empty_event`.

    Attributes
    ----------
    player: :class:`Player`
        The player whose queue drained.
    """

    __slots__ = ("player",)

    def __init__(self, player: Player) -> None:
        self.player = player


class PlayerClosedEvent(CadenceEvent):
    """This event is dispatched when the node reports the voice websocket was closed.

    Event can be listened to by adding a listener with the name `cadence_player_closed_event`.

    Attributes
    ----------
    player: :class:`Player`
        The affected player.
    code: :class:`int`
        The Discord close code.
    reason: :class:`str`
        The close reason.
    by_remote: :class:`bool`
        Whether Discord closed the connection.
    event: :class:`Closed`
        The raw event object.
    """

    __slots__ = ("player", "code", "reason", "by_remote", "event")

    def __init__(self, player: Player, event_object: Closed) -> None:
        self.player = player
        self.code = event_object.code
        self.reason = event_object.reason
        self.by_remote = event_object.byRemote
        self.event = event_object


class PlayerUpdateEvent(CadenceEvent):
    """This event is dispatched when the player's progress changes.

    Event can be listened to by adding a listener with the name `cadence_player_update_event`.

    Attributes
    ----------
    player: :class:`Player`
        The player that was updated.
    position: :class:`int`
        The position of the player.
    timestamp: :class:`int`
        The node timestamp of the update.
    event: :class:`PlayerUpdate`
        The raw event object.
    """

    __slots__ = ("player", "position", "timestamp", "event")

    def __init__(self, player: Player, event_object: PlayerUpdate) -> None:
        self.player = player
        self.position = event_object.state.position
        self.timestamp = event_object.state.time
        self.event = event_object


class PlayerResumedEvent(CadenceEvent):
    """This event is dispatched when the node session of a player was resumed.

    Event can be listened to by adding a listener with the name `cadence_player_resumed_event`.
    """

    __slots__ = ("player",)

    def __init__(self, player: Player) -> None:
        self.player = player


class PlayerMovedEvent(CadenceEvent):
    """This event is dispatched when the bot joins, leaves or is moved between voice channels.

    Event can be listened to by adding a listener with the name `cadence_player_moved_event`.

    Attributes
    ----------
    player: :class:`Player`
        The affected player.
    state: :class:`PlayerMovedState`
        What happened to the voice connection.
    before: :class:`int` | None
        The previous voice channel id.
    after: :class:`int` | None
        The new voice channel id.
    """

    __slots__ = ("player", "state", "before", "after")

    def __init__(self, player: Player, state: PlayerMovedState, before: int | None, after: int | None) -> None:
        self.player = player
        self.state = state
        self.before = before
        self.after = after


class PlayerRateLimitedEvent(CadenceEvent):
    """This event is dispatched when a sliding window starts suppressing repeated failures.

    Event can be listened to by adding a listener with the name `cadence_player_rate_limited_event`.

    Attributes
    ----------
    player: :class:`Player`
        The affected player.
    category: :class:`str`
        One of ``exception``, ``stuck`` or ``resolve_error``.
    """

    __slots__ = ("player", "category")

    def __init__(self, player: Player, category: str) -> None:
        self.player = player
        self.category = category


class DebugEvent(CadenceEvent):
    """Diagnostic messages from a player or the client.

    Event can be listened to by adding a listener with the name `cadence_debug_event`.
    """

    __slots__ = ("player", "message")

    def __init__(self, player: Player | None, message: str) -> None:
        self.player = player
        self.message = message
