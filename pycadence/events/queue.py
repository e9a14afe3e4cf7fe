from __future__ import annotations

from typing import TYPE_CHECKING

from pycadence.events.base import CadenceEvent

if TYPE_CHECKING:
    from pycadence.players.player import Player


class QueueUpdatedEvent(CadenceEvent):
    """This event is dispatched whenever the contents or order of a queue change.

    Event can be listened to by adding a listener with the name `cadence_queue_updated_event`.
    """

    __slots__ = ("player",)

    def __init__(self, player: Player) -> None:
        self.player = player
