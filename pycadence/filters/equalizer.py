from __future__ import annotations

from typing import Final

from pycadence.filters.utils import FilterMixin

BAND_COUNT: Final[int] = 15


class Equalizer(FilterMixin):
    """Class representing a usable equalizer.

    Parameters
    ------------
    levels: list[dict[str, int | float]]
        A list of ``{"band": int, "gain": float}`` pairs, missing bands are flat.
    name: str
        An Optional string to name this Equalizer. Defaults to 'CustomEqualizer'
    """

    __slots__ = ("_bands", "_name")

    def __init__(self, *, levels: list[dict[str, int | float]] | None = None, name: str = "CustomEqualizer"):
        super().__init__()
        self._name = name
        self._bands = [0.0] * BAND_COUNT
        for level in levels or []:
            self.set_gain(int(level["band"]), float(level["gain"]))

    def to_dict(self) -> dict[str, list[dict[str, int | float]] | str]:
        return {"equalizer": self.bands, "name": self._name}

    @classmethod
    def from_dict(cls, data: dict) -> Equalizer:
        return cls(levels=data["equalizer"], name=data.get("name", "CustomEqualizer"))

    def __str__(self):
        return self._name

    def __repr__(self):
        return f"<Equalizer: name={self._name}, bands={self.bands}>"

    @property
    def name(self) -> str:
        """The Equalizers friendly name"""
        return self._name

    @property
    def bands(self) -> list[dict[str, int | float]]:
        return [{"band": band, "gain": gain} for band, gain in enumerate(self._bands)]

    @classmethod
    def flat(cls) -> Equalizer:
        """Flat Equalizer.
        Resets your EQ to Flat.
        """
        return cls(name="Default")

    @classmethod
    def default(cls) -> Equalizer:
        return cls.flat()

    def get(self) -> list[dict[str, int | float]]:
        return [] if self.off else self.bands

    def reset(self) -> None:
        self._bands = [0.0] * BAND_COUNT
        self._name = "Default"

    def set_gain(self, band: int, gain: float) -> None:
        if band < 0 or band >= BAND_COUNT:
            raise IndexError(f"Band {band} does not exist!")
        self._bands[band] = float(min(max(gain, -0.25), 1.0))

    def get_gain(self, band: int) -> float:
        if band < 0 or band >= BAND_COUNT:
            raise IndexError(f"Band {band} does not exist!")
        return self._bands[band]
