from __future__ import annotations

from pycadence.filters.utils import FilterMixin


class Volume(FilterMixin):
    """The filter volume as a multiplier, where ``1.0`` is unchanged and ``5.0`` is the node's maximum."""

    __slots__ = ("_value",)

    def __init__(self, value: float = 1.0):
        super().__init__()
        self.value = value

    @classmethod
    def from_percentage(cls, percentage: int | float) -> Volume:
        return cls(percentage / 100)

    def to_dict(self) -> dict[str, float]:
        return {"volume": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, float]) -> Volume:
        return cls(data["volume"])

    @property
    def value(self) -> float:
        return self._value

    @value.setter
    def value(self, v: float):
        if v < 0:
            raise ValueError(f"Volume must be must be greater than or equals to zero, not {v}")
        self._value = min(float(v), 5.0)

    def get(self) -> float:
        return self.value

    def get_int_value(self) -> int:
        return min(max(int(round(self.value * 100)), 0), 500)

    def reset(self) -> None:
        self.value = 1.0

    def __repr__(self):
        return f"<Volume: value={self.value}>"
