from __future__ import annotations

from pycadence.exceptions.base import InvalidStateException


class PlayerDestroyedException(InvalidStateException):
    """Raised when a player that is being destroyed or was destroyed is used"""


class PlayerAlreadyInitializedException(InvalidStateException):
    """Raised when a player is initialized twice"""


class NoCurrentTrackException(InvalidStateException):
    """Raised when an operation requires a current track and there is none"""


class TrackNotSeekableException(InvalidStateException):
    """Raised when seeking a track that does not support it"""


class ClientNotAttachedException(InvalidStateException):
    """Raised when a track is used before a client was attached to it"""
