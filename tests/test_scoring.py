from __future__ import annotations

from pycadence.players.tracks.scoring import is_preview, score, select_best_candidate
from tests.conftest import make_track


def test_topic_channel_beats_music_video() -> None:
    video = make_track("v", title="Song (Official Music Video)", author="Band")
    topic = make_track("t", title="Song", author="Band - Topic")
    assert score(topic, title="Song", author="Band") > score(video, title="Song", author="Band")
    assert select_best_candidate([video, topic], title="Song", author="Band") is topic


def test_non_youtube_derivatives_are_penalized() -> None:
    remix = make_track("r", title="Song (Remix)", author="Band", source="soundcloud")
    original = make_track("o", title="Song (Original Mix)", author="Band Official", source="soundcloud")
    assert score(original) == 8
    assert score(remix) == -5


def test_duration_within_tolerance_scores() -> None:
    track = make_track("a", length=181_000)
    assert score(track, length=180_000) - score(track) == 2
    assert score(track, length=190_000) == score(track)


def test_ties_keep_search_order() -> None:
    first, second = make_track("a"), make_track("b")
    assert select_best_candidate([first, second]) is first


def test_preview_detection() -> None:
    assert is_preview(make_track("a", plugin_info={"isPreview": True}))
    assert is_preview(make_track("b", uri="https://cdn.example.com/preview/b.mp3"))
    assert is_preview(make_track("c", title="Song (preview)"))
    assert not is_preview(make_track("d"))
    assert select_best_candidate([make_track("e", title="Song (Preview)")]) is None
