from __future__ import annotations

from pycadence.filters.utils import FilterValue, ParameterFilter


class Karaoke(ParameterFilter):
    __slots__ = ()

    level = FilterValue("level", 0.0, 1.0)
    mono_level = FilterValue("monoLevel", 0.0, 1.0)
    filter_band = FilterValue("filterBand")
    filter_width = FilterValue("filterWidth")


class Timescale(ParameterFilter):
    __slots__ = ()

    speed = FilterValue("speed", 0.0, exclusive_minimum=True)
    pitch = FilterValue("pitch", 0.0, exclusive_minimum=True)
    rate = FilterValue("rate", 0.0, exclusive_minimum=True)


class Tremolo(ParameterFilter):
    __slots__ = ()

    frequency = FilterValue("frequency", 0.0, exclusive_minimum=True)
    depth = FilterValue("depth", 0.0, 1.0, exclusive_minimum=True)


class Vibrato(ParameterFilter):
    __slots__ = ()

    frequency = FilterValue("frequency", 0.0, 14.0, exclusive_minimum=True)
    depth = FilterValue("depth", 0.0, 1.0, exclusive_minimum=True)


class Rotation(ParameterFilter):
    __slots__ = ()

    hertz = FilterValue("rotationHz")


class Distortion(ParameterFilter):
    __slots__ = ()

    sin_offset = FilterValue("sinOffset")
    sin_scale = FilterValue("sinScale")
    cos_offset = FilterValue("cosOffset")
    cos_scale = FilterValue("cosScale")
    tan_offset = FilterValue("tanOffset")
    tan_scale = FilterValue("tanScale")
    offset = FilterValue("offset")
    scale = FilterValue("scale")


class ChannelMix(ParameterFilter):
    __slots__ = ()

    left_to_left = FilterValue("leftToLeft", 0.0, 1.0)
    left_to_right = FilterValue("leftToRight", 0.0, 1.0)
    right_to_left = FilterValue("rightToLeft", 0.0, 1.0)
    right_to_right = FilterValue("rightToRight", 0.0, 1.0)


class LowPass(ParameterFilter):
    __slots__ = ()

    smoothing = FilterValue("smoothing", 1.0, exclusive_minimum=True)
