from __future__ import annotations


class CadenceEvent:
    """The base for all Py-Cadence events."""

    __slots__ = ()

    def __repr__(self) -> str:
        values = " ".join(f"{name}={getattr(self, name, None)!r}" for name in self.__slots__)
        return f"<{self.__class__.__name__} {values}>"
