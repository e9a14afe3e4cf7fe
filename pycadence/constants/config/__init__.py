from __future__ import annotations

import os

from pycadence.constants.config.utils import env_bool, env_int
from pycadence.constants.sources import SOURCE_IDS, YOUTUBE_THUMBNAIL_SIZES
from pycadence.logging import getLogger

LOGGER = getLogger("PyCadence.Environment")

DEFAULT_SEARCH_ENGINE = os.getenv("PYCADENCE__DEFAULT_SEARCH_ENGINE", "youtube")
if DEFAULT_SEARCH_ENGINE not in SOURCE_IDS:
    LOGGER.warning("Invalid search engine %s, defaulting to youtube", DEFAULT_SEARCH_ENGINE)
    LOGGER.info("Valid search engines are %s", ", ".join(SOURCE_IDS.keys()))
    DEFAULT_SEARCH_ENGINE = "youtube"

SOURCE_FORCE_RESOLVE = [
    s for s in map(str.strip, os.getenv("PYCADENCE__SOURCE_FORCE_RESOLVE", "").split("|")) if s
]

DEFAULT_YOUTUBE_THUMBNAIL = os.getenv("PYCADENCE__DEFAULT_YOUTUBE_THUMBNAIL", "hqdefault")
if DEFAULT_YOUTUBE_THUMBNAIL not in YOUTUBE_THUMBNAIL_SIZES:
    LOGGER.warning("Invalid thumbnail size %s, defaulting to hqdefault", DEFAULT_YOUTUBE_THUMBNAIL)
    DEFAULT_YOUTUBE_THUMBNAIL = "hqdefault"

DEFAULT_PLAYER_VOLUME = min(env_int("PYCADENCE__DEFAULT_PLAYER_VOLUME", 100), 1000)

EXCEPTION_WINDOW_MS = env_int("PYCADENCE__EXCEPTION_WINDOW_MS", 10_000, 1)
EXCEPTION_MAX = env_int("PYCADENCE__EXCEPTION_MAX", 3, 1)
STUCK_WINDOW_MS = env_int("PYCADENCE__STUCK_WINDOW_MS", 10_000, 1)
STUCK_MAX = env_int("PYCADENCE__STUCK_MAX", 3, 1)
RESOLVE_ERROR_WINDOW_MS = env_int("PYCADENCE__RESOLVE_ERROR_WINDOW_MS", 10_000, 1)
RESOLVE_ERROR_MAX = env_int("PYCADENCE__RESOLVE_ERROR_MAX", 3, 1)

SKIP_SPAM_ATTEMPTS_WINDOW_MS = env_int("PYCADENCE__SKIP_SPAM_ATTEMPTS_WINDOW_MS", 5_000, 1)
SKIP_SPAM_ATTEMPTS_MAX = env_int("PYCADENCE__SKIP_SPAM_ATTEMPTS_MAX", 5, 1)
SKIP_SPAM_DESTROY_WINDOW_MS = env_int("PYCADENCE__SKIP_SPAM_DESTROY_WINDOW_MS", 60_000, 1)
SKIP_SPAM_DESTROY_MAX = env_int("PYCADENCE__SKIP_SPAM_DESTROY_MAX", 3, 1)
SKIP_SPAM_COOLDOWN_MS = env_int("PYCADENCE__SKIP_SPAM_COOLDOWN_MS", 3_000)

SKIP_ON_END = env_bool("PYCADENCE__SKIP_ON_END", True)
SKIP_ON_EXCEPTION = env_bool("PYCADENCE__SKIP_ON_EXCEPTION", True)
SKIP_ON_STUCK = env_bool("PYCADENCE__SKIP_ON_STUCK", True)
SKIP_ON_RESOLVE_ERROR = env_bool("PYCADENCE__SKIP_ON_RESOLVE_ERROR", True)

REMOTE_TIMEOUT = env_int("PYCADENCE__REMOTE_TIMEOUT", 0) or None
