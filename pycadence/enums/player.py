from __future__ import annotations

from enum import Enum, IntEnum


class PlayerState(IntEnum):
    """
    Lifecycle state of a player
    """

    CONNECTING = 0
    CONNECTED = 1
    DESTROYING = 2
    DESTROYED = 3


class LoopState(Enum):
    """
    Loop mode of a player
    """

    NONE = "none"
    TRACK = "track"
    QUEUE = "queue"

    def next(self) -> LoopState:
        """
        The loop mode after this one when cycling
        """
        match self:
            case LoopState.NONE:
                return LoopState.QUEUE
            case LoopState.QUEUE:
                return LoopState.TRACK
            case _:
                return LoopState.NONE


class PlayerMovedState(Enum):
    UNKNOWN = "unknown"
    JOINED = "joined"
    LEFT = "left"
    MOVED = "moved"


class SearchResultType(Enum):
    TRACK = "track"
    PLAYLIST = "playlist"
    SEARCH = "search"
    EMPTY = "empty"
    ERROR = "error"
