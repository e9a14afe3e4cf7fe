from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from pycadence.constants.regex import (
    AUDIO_TITLE,
    DERIVATIVE_TITLE,
    MUSIC_VIDEO_TITLE,
    OFFICIAL_AUTHOR,
    ORIGINAL_MIX_TITLE,
    PREVIEW_TITLE,
    TOPIC_AUTHOR,
)
from pycadence.constants.sources import YOUTUBE_SOURCES

if TYPE_CHECKING:
    from pycadence.players.tracks.obj import Track

DURATION_TOLERANCE_MS = 2000


def is_preview(track: Track) -> bool:
    """Whether the candidate is a short preview clip rather than the full track."""
    if track.plugin_info.get("isPreview"):
        return True
    if track.uri and "preview" in track.uri.lower():
        return True
    return bool(track.title and PREVIEW_TITLE.search(track.title))


def score(candidate: Track, *, title: str | None = None, author: str | None = None, length: int | None = None) -> int:
    """Score a search candidate against the track being resolved, higher is better."""
    value = 0
    candidate_title = candidate.title or ""
    candidate_author = candidate.author or ""
    if candidate.source_name in YOUTUBE_SOURCES:
        if TOPIC_AUTHOR.search(candidate_author):
            value += 10
        if MUSIC_VIDEO_TITLE.search(candidate_title):
            value -= 5
        if AUDIO_TITLE.search(candidate_title):
            value += 3
    else:
        if OFFICIAL_AUTHOR.search(candidate_author):
            value += 5
        if ORIGINAL_MIX_TITLE.search(candidate_title):
            value += 3
        if DERIVATIVE_TITLE.search(candidate_title):
            value -= 5
    if author and TOPIC_AUTHOR.sub("", candidate_author).casefold() == author.casefold():
        value += 4
    if title and candidate_title.casefold() == title.casefold():
        value += 4
    if length and candidate.length and abs(candidate.length - length) <= DURATION_TOLERANCE_MS:
        value += 2
    return value


def select_best_candidate(
    candidates: Iterable[Track], *, title: str | None = None, author: str | None = None, length: int | None = None
) -> Track | None:
    """Pick the most likely match for a track from search results.

    Preview clips are discarded, the rest are ranked by :func:`score`. Candidates with the
    same score keep their search order.

    Returns
    -------
    Track | None
        The best candidate, or ``None`` if nothing usable was found.
    """
    usable = [candidate for candidate in candidates if not is_preview(candidate)]
    if not usable:
        return None
    ranked = sorted(usable, key=lambda c: score(c, title=title, author=author, length=length), reverse=True)
    return ranked[0]
