from __future__ import annotations

from pycadence.exceptions.base import NotFoundException


class TrackNotFoundException(NotFoundException):
    """Raised when a track is not found"""


class TrackResolveException(NotFoundException):
    """Raised when a track could not be resolved into a playable one"""

    def __init__(self, message: str, *args, **kwargs) -> None:
        super().__init__(message, *args, **kwargs)

        self.message = message
