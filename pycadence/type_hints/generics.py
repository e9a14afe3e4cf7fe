from __future__ import annotations

from collections.abc import Awaitable
from typing import TypeVar, Union

ANY_GENERIC_TYPE = TypeVar("ANY_GENERIC_TYPE")

MaybeAwaitable = Union[ANY_GENERIC_TYPE, Awaitable[ANY_GENERIC_TYPE]]
