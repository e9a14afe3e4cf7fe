from __future__ import annotations

import random
from collections.abc import Callable, Iterable, Iterator
from typing import overload

from pycadence.exceptions.base import InvalidArgumentException
from pycadence.players.tracks.obj import Track


class TrackQueue:
    """The ordered tracks of a player and the cursor into them.

    Tracks before :attr:`current_id` have been played, the one at :attr:`current_id` is
    playing or about to play, the rest are upcoming. The cursor may sit one past the end,
    which means nothing is left to play.

    Indexing, iteration and ``len()`` are read-only, every change goes through the
    mutator methods, each of which calls ``on_change``.
    """

    __slots__ = ("_tracks", "_current_id", "_on_change")

    def __init__(self, on_change: Callable[[], None] | None = None) -> None:
        self._tracks: list[Track] = []
        self._current_id = 0
        self._on_change = on_change

    def __repr__(self) -> str:
        return f"<TrackQueue size={len(self)} current_id={self._current_id}>"

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(list(self._tracks))

    def __contains__(self, item: object) -> bool:
        return item in self._tracks

    @overload
    def __getitem__(self, index: int) -> Track:
        ...

    @overload
    def __getitem__(self, index: slice) -> list[Track]:
        ...

    def __getitem__(self, index: int | slice) -> Track | list[Track]:
        return self._tracks[index]

    @property
    def current_id(self) -> int:
        """The index of the playing or pending track"""
        return self._current_id

    @current_id.setter
    def current_id(self, value: int) -> None:
        self._current_id = value

    @property
    def current(self) -> Track | None:
        """The track at the cursor, ``None`` when the cursor is out of bounds"""
        if 0 <= self._current_id < len(self._tracks):
            return self._tracks[self._current_id]
        return None

    @property
    def size(self) -> int:
        return len(self._tracks)

    @property
    def total_size(self) -> int:
        """The queue length plus one when there is a current track.

        The current track is also part of the length, so it is counted twice.
        Callers rely on this value as it is.
        """
        return len(self._tracks) + (1 if self.current is not None else 0)

    @property
    def is_empty(self) -> bool:
        return not self._tracks

    @property
    def is_end(self) -> bool:
        """Whether the cursor is on the last track or past it"""
        return len(self._tracks) <= self._current_id + 1

    @property
    def duration(self) -> int:
        """The summed length of every track in milliseconds"""
        return sum(track.length or 0 for track in self._tracks)

    @property
    def played(self) -> list[Track]:
        return self._tracks[: max(self._current_id, 0)]

    @property
    def upcoming(self) -> list[Track]:
        return self._tracks[self._current_id + 1 :]

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    @staticmethod
    def _validate(tracks: Iterable[Track]) -> list[Track]:
        tracks = list(tracks)
        if any(not isinstance(track, Track) for track in tracks):
            raise InvalidArgumentException("Track must be an instance of Track")
        return tracks

    def add(self, track: Track | Iterable[Track]) -> TrackQueue:
        """Append one or more tracks to the end of the queue."""
        tracks = self._validate([track] if isinstance(track, Track) else track)
        self._tracks.extend(tracks)
        self._changed()
        return self

    def remove(self, position: int) -> Track:
        """Remove the track at ``position``.

        Raises
        ------
        InvalidArgumentException
            If the position is out of range or is the current track.
        """
        if not isinstance(position, int) or position < 0 or position >= len(self._tracks):
            raise InvalidArgumentException(f"Position must be between 0 and {len(self._tracks) - 1}")
        if position == self._current_id:
            raise InvalidArgumentException("You cannot remove the current track")
        track = self._tracks.pop(position)
        if position < self._current_id:
            self._current_id -= 1
        self._changed()
        return track

    def shuffle(self) -> TrackQueue:
        """Shuffle the upcoming tracks, played tracks and the current one keep their place."""
        upcoming = self.upcoming
        random.shuffle(upcoming)
        self._tracks[self._current_id + 1 :] = upcoming
        self._changed()
        return self

    def clear(self) -> TrackQueue:
        """Drop everything except the current track, which becomes the only entry."""
        current = self.current
        self._tracks = [current] if current is not None else []
        self._current_id = 0
        self._changed()
        return self

    def remove_dupes(self) -> TrackQueue:
        """Remove tracks whose URI already appeared earlier, the current track always stays."""
        current = self.current
        seen = {current.uri} if current is not None else set()

        def unique(tracks: list[Track]) -> list[Track]:
            kept = []
            for track in tracks:
                if track.uri in seen:
                    continue
                seen.add(track.uri)
                kept.append(track)
            return kept

        played = unique(self.played)
        if current is None:
            self._tracks = played
            self._current_id = len(played)
        else:
            self._tracks = [*played, current, *unique(self.upcoming)]
            self._current_id = len(played)
        self._changed()
        return self

    def splice(self, start: int, delete_count: int = 0, *tracks: Track, allow_current: bool = False) -> list[Track]:
        """Remove ``delete_count`` tracks at ``start`` and insert ``tracks`` there.

        ``start`` follows the same rules as a slice bound, negative values count from the end.
        Changes made entirely before the cursor move it so the current track stays current.

        Parameters
        ----------
        allow_current : bool
            Allow the removed range to include the current track.

        Returns
        -------
        list[Track]
            The removed tracks.

        Raises
        ------
        InvalidArgumentException
            If the removed range includes the current track and ``allow_current`` is not set.
        """
        new = self._validate(tracks)
        length = len(self._tracks)
        if start < 0:
            start = max(length + start, 0)
        start = min(start, length)
        delete_count = min(max(delete_count, 0), length - start)
        end = start + delete_count
        if not allow_current and self.current is not None and start <= self._current_id < end:
            raise InvalidArgumentException("You cannot remove the current track")
        removed = self._tracks[start:end]
        self._tracks[start:end] = new
        if end <= self._current_id and start < self._current_id:
            self._current_id += len(new) - delete_count
        self._changed()
        return removed
