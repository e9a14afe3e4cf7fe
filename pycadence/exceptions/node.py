from __future__ import annotations

from pycadence.exceptions.base import NotFoundException


class NoNodeAvailableException(NotFoundException):
    """Raised when no node is available"""


class VoiceConnectionNotFoundException(NotFoundException):
    """Raised when the voice gateway has no connection for a guild"""
