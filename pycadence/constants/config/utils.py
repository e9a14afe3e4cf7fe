from __future__ import annotations

import os

from pycadence.logging import getLogger

LOGGER = getLogger("PyCadence.Environment")


def env_int(name: str, default: int, minimum: int = 0) -> int:
    """Read an integer environment variable, falling back to the default on invalid values."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        LOGGER.warning("Invalid value %r for %s, defaulting to %s", raw, name, default)
        return default
    if value < minimum:
        LOGGER.warning("Value %s for %s is below %s, defaulting to %s", value, name, minimum, default)
        return default
    return value


def env_bool(name: str, default: bool) -> bool:
    """Read a 0/1 environment variable."""
    return bool(env_int(name, int(default)))
