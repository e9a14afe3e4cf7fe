from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pycadence.constants import config
from pycadence.constants.sources import SOURCE_IDS, YOUTUBE_THUMBNAIL_SIZES
from pycadence.exceptions.base import InvalidArgumentException
from pycadence.players.rate_limit import RateLimit
from pycadence.type_hints.generics import MaybeAwaitable

if TYPE_CHECKING:
    from pycadence.players.player import Player
    from pycadence.players.tracks.obj import Track

TRACK_RESOLVER_TYPE = Callable[["Track", "Player | None"], MaybeAwaitable[Any]]


@dataclasses.dataclass(frozen=True, kw_only=True, slots=True)
class SkipSpamLimits:
    """Limits protecting a player from runaway skip chains.

    Attributes
    ----------
    attempts: RateLimit
        How many skips may happen inside the window before a cooldown.
    destroy: RateLimit
        How many cooldowns may happen inside the window before the player destroys itself.
    cooldown: float
        How long to pause, in milliseconds, when the attempt limit is reached.
    """

    attempts: RateLimit = dataclasses.field(
        default_factory=lambda: RateLimit(
            window=config.SKIP_SPAM_ATTEMPTS_WINDOW_MS, maximum=config.SKIP_SPAM_ATTEMPTS_MAX
        )
    )
    destroy: RateLimit = dataclasses.field(
        default_factory=lambda: RateLimit(window=config.SKIP_SPAM_DESTROY_WINDOW_MS, maximum=config.SKIP_SPAM_DESTROY_MAX)
    )
    cooldown: float = config.SKIP_SPAM_COOLDOWN_MS

    def __post_init__(self) -> None:
        if self.cooldown < 0:
            raise InvalidArgumentException(f"cooldown must not be negative, not {self.cooldown}")


@dataclasses.dataclass(frozen=True, kw_only=True, slots=True)
class ClientOptions:
    """Settings shared by every player of a client.

    Defaults come from the ``PYCADENCE__*`` environment variables.
    """

    default_search_engine: str = config.DEFAULT_SEARCH_ENGINE
    source_force_resolve: tuple[str, ...] = tuple(config.SOURCE_FORCE_RESOLVE)
    track_resolver: TRACK_RESOLVER_TYPE | None = None
    default_youtube_thumbnail: str = config.DEFAULT_YOUTUBE_THUMBNAIL
    default_volume: int = config.DEFAULT_PLAYER_VOLUME
    exceptions: RateLimit = dataclasses.field(
        default_factory=lambda: RateLimit(window=config.EXCEPTION_WINDOW_MS, maximum=config.EXCEPTION_MAX)
    )
    stuck: RateLimit = dataclasses.field(
        default_factory=lambda: RateLimit(window=config.STUCK_WINDOW_MS, maximum=config.STUCK_MAX)
    )
    resolve_errors: RateLimit = dataclasses.field(
        default_factory=lambda: RateLimit(window=config.RESOLVE_ERROR_WINDOW_MS, maximum=config.RESOLVE_ERROR_MAX)
    )
    skip_spam: SkipSpamLimits = dataclasses.field(default_factory=SkipSpamLimits)
    skip_on_end: bool = config.SKIP_ON_END
    skip_on_exception: bool = config.SKIP_ON_EXCEPTION
    skip_on_stuck: bool = config.SKIP_ON_STUCK
    skip_on_resolve_error: bool = config.SKIP_ON_RESOLVE_ERROR
    remote_timeout: float | None = config.REMOTE_TIMEOUT

    def __post_init__(self) -> None:
        if self.default_search_engine not in SOURCE_IDS:
            raise InvalidArgumentException(
                f"Unknown search engine {self.default_search_engine!r}, expected one of {', '.join(SOURCE_IDS)}"
            )
        if self.default_youtube_thumbnail not in YOUTUBE_THUMBNAIL_SIZES:
            raise InvalidArgumentException(f"Unknown thumbnail size {self.default_youtube_thumbnail!r}")
        if self.remote_timeout is not None and self.remote_timeout <= 0:
            raise InvalidArgumentException(f"remote_timeout must be positive, not {self.remote_timeout}")
        object.__setattr__(self, "source_force_resolve", tuple(self.source_force_resolve))
