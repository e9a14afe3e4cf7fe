from __future__ import annotations

import pytest

from pycadence.players.rate_limit import RateLimit, SlidingWindow


def test_allow_admits_up_to_maximum_inside_window() -> None:
    window = SlidingWindow(RateLimit(window=10_000, maximum=3))
    assert [window.allow(t) for t in (0, 1, 2, 3)] == [True, True, True, False]


def test_occurrences_expire_after_the_window() -> None:
    window = SlidingWindow(RateLimit(window=10_000, maximum=3))
    for t in (0, 1, 2):
        window.allow(t)
    assert not window.allow(9_999)
    assert window.allow(10_001)
    assert len(window) == 2


def test_engage_reports_only_the_first_suppression() -> None:
    window = SlidingWindow(RateLimit(window=100, maximum=1))
    window.allow(0)
    assert not window.allow(1)
    assert window.engage()
    assert not window.engage()
    assert window.allow(200)
    assert not window.allow(201)
    assert window.engage()


def test_hit_counts_unconditionally() -> None:
    window = SlidingWindow(RateLimit(window=5_000, maximum=2))
    assert [window.hit(t) for t in (0, 1, 2)] == [1, 2, 3]
    assert window.hit(5_002) == 1
    window.clear()
    assert len(window) == 0


@pytest.mark.parametrize("window, maximum", [(0, 1), (-5, 1), (100, 0)])
def test_invalid_limits(window: float, maximum: int) -> None:
    with pytest.raises(ValueError):
        RateLimit(window=window, maximum=maximum)
