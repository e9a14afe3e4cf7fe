from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pycadence.event_dispatcher.utils import get_event_name
from pycadence.logging import getLogger

if TYPE_CHECKING:
    from discord import Client as DiscordClient

    from pycadence.events.base import CadenceEvent

LOGGER = getLogger("PyCadence.Dispatcher")

LISTENER_TYPE = Callable[[Any], Any]


class ListenerRegistry:
    """Typed callbacks keyed by event class.

    A listener registered for a base class, for example :class:`CadenceEvent`,
    receives every subclass of it as well.
    Coroutine listeners are scheduled as tasks, so dispatching never waits on them.
    """

    __slots__ = ("_listeners", "_tasks")

    def __init__(self) -> None:
        self._listeners: dict[type[CadenceEvent], list[LISTENER_TYPE]] = {}
        self._tasks: set[asyncio.Task] = set()

    def add(self, event_type: type[CadenceEvent], listener: LISTENER_TYPE) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def remove(self, event_type: type[CadenceEvent], listener: LISTENER_TYPE) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def clear(self) -> None:
        self._listeners.clear()

    def dispatch(self, event: CadenceEvent) -> None:
        for event_type in type(event).__mro__:
            for listener in list(self._listeners.get(event_type, [])):
                self._call(listener, event)

    def _call(self, listener: LISTENER_TYPE, event: CadenceEvent) -> None:
        try:
            result = listener(event)
        except Exception as exc:
            LOGGER.error("Listener %r failed for %s: %s", listener, type(event).__name__, exc)
            LOGGER.debug("Listener %r failed for %s", listener, type(event).__name__, exc_info=True)
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and (exc := task.exception()) is not None:
            LOGGER.error("Listener task failed: %s", exc)
            LOGGER.debug("Listener task failed", exc_info=exc)


class DispatchManager:
    """
    The Dispatcher is responsible for dispatching events to the appropriate
    handlers.

    Every event reaches the listeners added with :meth:`add_listener`, and when a
    discord.py client is attached it is also dispatched on it, where the method
    names are the event names.

    Examples
    --------
    >>> from discord.ext import commands

    >>> @commands.Cog.listener()
    >>> async def on_cadence_player_empty_event(self, event: PlayerEmptyEvent):
    >>>    print(f"Queue drained: {event.player}")

    >>> @commands.Cog.listener()
    >>> async def on_cadence_player_stuck_event(self, event: PlayerStuckEvent):
    >>>    print(f"Track got stuck: {event.track}")

    """

    __slots__ = ("_bot", "listeners", "mapping")

    def __init__(self, bot: DiscordClient | None = None) -> None:
        from pycadence import events
        from pycadence.events.base import CadenceEvent

        self._bot = bot
        self.listeners = ListenerRegistry()

        self.mapping = {
            c: get_event_name(c)
            for _, c in inspect.getmembers(events, inspect.isclass)
            if issubclass(c, CadenceEvent) and c is not CadenceEvent
        }

    def add_listener(self, event_type: type[CadenceEvent], listener: LISTENER_TYPE) -> None:
        self.listeners.add(event_type, listener)

    def remove_listener(self, event_type: type[CadenceEvent], listener: LISTENER_TYPE) -> None:
        self.listeners.remove(event_type, listener)

    def dispatch(self, event: CadenceEvent) -> None:
        self.listeners.dispatch(event)
        if self._bot is not None:
            self._bot.dispatch(self.mapping[type(event)], event)

    def get_event_names(self) -> set[str]:
        return set(self.mapping.values())
