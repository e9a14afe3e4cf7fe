from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True, kw_only=True, slots=True)
class RateLimit:
    """A window length in milliseconds and the number of occurrences allowed inside it."""

    window: float
    maximum: int

    def __post_init__(self) -> None:
        if self.window <= 0:
            raise ValueError(f"window must be greater than 0, not {self.window}")
        if self.maximum < 1:
            raise ValueError(f"maximum must be at least 1, not {self.maximum}")


class SlidingWindow:
    """A rolling, time-bounded record of recent occurrences.

    Timestamps are in milliseconds and come from the caller, which keeps the window
    independent of any particular clock.
    """

    __slots__ = ("_limit", "_timestamps", "_saturated")

    def __init__(self, limit: RateLimit) -> None:
        self._limit = limit
        self._timestamps: list[float] = []
        self._saturated = False

    def __len__(self) -> int:
        return len(self._timestamps)

    def __repr__(self) -> str:
        return f"<SlidingWindow window={self._limit.window} maximum={self._limit.maximum} count={len(self)}>"

    @property
    def limit(self) -> RateLimit:
        return self._limit

    def prune(self, now: float) -> int:
        """Drop occurrences that fell out of the window and return how many remain."""
        self._timestamps = [t for t in self._timestamps if now - t < self._limit.window]
        return len(self._timestamps)

    def allow(self, now: float) -> bool:
        """Record an occurrence if the window still has room.

        Returns
        -------
        bool
            ``True`` if the occurrence was admitted, ``False`` if it is suppressed.
        """
        if self.prune(now) < self._limit.maximum:
            self._timestamps.append(now)
            self._saturated = False
            return True
        return False

    def engage(self) -> bool:
        """Mark the window as saturated, returns ``True`` only on the first call of a saturated run."""
        if self._saturated:
            return False
        self._saturated = True
        return True

    def hit(self, now: float) -> int:
        """Record an occurrence unconditionally and return the count inside the window."""
        self.prune(now)
        self._timestamps.append(now)
        return len(self._timestamps)

    def clear(self) -> None:
        self._timestamps.clear()
        self._saturated = False
