from __future__ import annotations

from pycadence.filters.effects import ChannelMix, Distortion, Karaoke, LowPass, Rotation, Timescale, Tremolo, Vibrato
from pycadence.filters.equalizer import Equalizer
from pycadence.filters.volume import Volume

__all__ = (
    "ChannelMix",
    "Distortion",
    "Equalizer",
    "Karaoke",
    "LowPass",
    "Rotation",
    "Timescale",
    "Tremolo",
    "Vibrato",
    "Volume",
)
