from __future__ import annotations

import asyncio
import dataclasses
import itertools
from collections.abc import Awaitable, Callable
from typing import Any

from pycadence.logging import getLogger
from pycadence.type_hints.generics import ANY_GENERIC_TYPE

LOGGER = getLogger("PyCadence.Sequencer")

PRIORITY_CONTROL = 2
PRIORITY_NOTIFY = 1


@dataclasses.dataclass(slots=True)
class PendingOperation:
    priority: int
    sequence: int
    name: str
    operation: Callable[[], Awaitable[Any]]
    future: asyncio.Future


class PlaybackSequencer:
    """Runs a player's mutating operations one at a time.

    Pending operations are ordered by descending priority, ties keep their submission order.
    A running operation is never interrupted, and an operation submitted while the run loop
    is draining is picked up before the loop exits.

    Parameters
    ----------
    name : str
        Used in log messages.
    on_error : Callable[[str, BaseException], None] | None
        Called with the operation name and the exception when an operation fails.
    """

    __slots__ = ("_name", "_on_error", "_pending", "_counter", "_task", "_idle")

    def __init__(self, name: str, on_error: Callable[[str, BaseException], None] | None = None) -> None:
        self._name = name
        self._on_error = on_error
        self._pending: list[PendingOperation] = []
        self._counter = itertools.count()
        self._task: asyncio.Task | None = None
        self._idle = asyncio.Event()
        self._idle.set()

    def __repr__(self) -> str:
        return f"<PlaybackSequencer name={self._name} pending={len(self._pending)} processing={self.is_processing}>"

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def is_processing(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> list[str]:
        """Names of the queued operations in the order they will run"""
        return [item.name for item in self._pending]

    def submit(
        self, name: str, priority: int, operation: Callable[[], Awaitable[ANY_GENERIC_TYPE]]
    ) -> asyncio.Future[ANY_GENERIC_TYPE]:
        """Queue an operation and return a future settled with its outcome."""
        future = asyncio.get_running_loop().create_future()
        self._pending.append(PendingOperation(priority, next(self._counter), name, operation, future))
        self._pending.sort(key=lambda item: (-item.priority, item.sequence))
        LOGGER.trace("[%s] Queued %s at priority %s (%s pending)", self._name, name, priority, len(self._pending))
        if not self.is_processing:
            self._idle.clear()
            self._task = asyncio.create_task(self._run(), name=f"PyCadence-Sequencer-{self._name}")
        return future

    def submit_nowait(self, name: str, priority: int, operation: Callable[[], Awaitable[Any]]) -> asyncio.Future:
        """Queue an operation nobody will await, its failure is only reported."""
        future = self.submit(name, priority, operation)
        future.add_done_callback(_consume_result)
        return future

    async def _run(self) -> None:
        try:
            while self._pending:
                item = self._pending.pop(0)
                if item.future.done():
                    continue
                LOGGER.trace("[%s] Running %s", self._name, item.name)
                try:
                    result = await item.operation()
                except asyncio.CancelledError:
                    if not item.future.done():
                        item.future.cancel()
                    raise
                except Exception as exc:
                    LOGGER.verbose("[%s] Operation %s failed: %s", self._name, item.name, exc)
                    LOGGER.debug("[%s] Operation %s failed", self._name, item.name, exc_info=True)
                    if self._on_error is not None:
                        self._on_error(item.name, exc)
                    if not item.future.done():
                        item.future.set_exception(exc)
                else:
                    if not item.future.done():
                        item.future.set_result(result)
        finally:
            self._idle.set()

    def cancel_pending(self, exception: BaseException) -> int:
        """Reject every queued operation that has not started yet, returns how many were rejected."""
        pending, self._pending = self._pending, []
        for item in pending:
            if not item.future.done():
                item.future.set_exception(exception)
        return len(pending)

    async def wait_until_idle(self) -> None:
        """Wait until nothing is queued and nothing is running."""
        while self.is_processing or self._pending:
            await self._idle.wait()
            # Let a loop that just finished clear its task before checking again
            await asyncio.sleep(0)


def _consume_result(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()
