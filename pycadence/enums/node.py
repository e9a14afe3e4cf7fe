from __future__ import annotations

from enum import IntEnum


class NodeState(IntEnum):
    """
    Connection state reported by a node client
    """

    CONNECTING = 0
    CONNECTED = 1
    DISCONNECTING = 2
    DISCONNECTED = 3
