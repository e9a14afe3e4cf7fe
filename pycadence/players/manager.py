from __future__ import annotations

import asyncio
import collections
from collections.abc import Awaitable, Callable, Iterator
from typing import TYPE_CHECKING

from pycadence.exceptions.player import PlayerDestroyedException
from pycadence.logging import getLogger
from pycadence.players.player import Player

if TYPE_CHECKING:
    from pycadence.core.client import Client

LOGGER = getLogger("PyCadence.PlayerController")


class PlayerController:
    """Represents the player manager that contains all the players.

    len(x):
        Returns the total amount of cached players.
    iter(x):
        Returns an iterator of all the players cached.

    Attributes
    ----------
    default_player_class: :class:`Player`
        The player class new players are built from.
    client: :class:`Client`
        The client that the player manager is initialized with.
    """

    __slots__ = ("_players", "_locks", "_lock_users", "default_player_class", "client")

    def __init__(self, client: Client, player: type[Player] = Player) -> None:
        if not issubclass(player, Player):
            raise ValueError("Player must implement Player")

        self.client = client
        self._players: dict[int, Player] = {}
        self._locks: dict[int, asyncio.Lock] = {}
        self._lock_users: collections.Counter[int] = collections.Counter()
        self.default_player_class = player

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[tuple[int, Player]]:
        """Returns an iterator that yields a tuple of (guild_id, player)"""
        yield from list(self._players.items())

    def __contains__(self, guild_id: int) -> bool:
        return guild_id in self._players

    @property
    def players(self) -> dict[int, Player]:
        """Returns a dictionary of all players in manager."""
        return self._players

    @property
    def playing_players(self) -> list[Player]:
        """Returns a list of all the playing players"""
        return [p for p in self._players.values() if p.playing]

    @property
    def not_playing_players(self) -> list[Player]:
        """Returns a list of all the not playing players"""
        return [p for p in self._players.values() if not p.playing]

    def get(self, guild_id: int) -> Player | None:
        """Gets a player from cache.

        Parameters
        ----------
        guild_id: :class:`int`
            The guild_id associated with the player to get.

        Returns
        -------
        Optional[:class:`Player`]
            The player associated with the guild id, if it exists.
        """
        return self._players.get(guild_id)

    def players_on(self, node_name: str) -> list[Player]:
        """Returns the players currently attached to the named node"""
        return [p for p in self._players.values() if p.node.name == node_name]

    def remove(self, guild_id: int, player: Player | None = None) -> Player | None:
        """Removes a player from the internal cache.

        When ``player`` is given the entry is only removed if it is still that player.
        """
        current = self._players.get(guild_id)
        if current is None or (player is not None and current is not player):
            return None
        LOGGER.debug("Removing player for guild %s from cache", guild_id)
        return self._players.pop(guild_id)

    async def create(self, guild_id: int, build: Callable[[], Awaitable[Player]]) -> tuple[Player, bool]:
        """Returns the player of the guild, building it with ``build`` when there is none.

        Concurrent calls for the same guild wait for each other, so only one player is ever built.
        A player that is being destroyed counts as absent, its teardown finishes before a new one is built.

        Returns
        -------
        tuple[Player, bool]
            The player, and whether it was created by this call.
        """
        lock = self._locks.setdefault(guild_id, asyncio.Lock())
        self._lock_users[guild_id] += 1
        try:
            async with lock:
                if (player := self._players.get(guild_id)) is not None:
                    if not player.is_destroyed:
                        LOGGER.verbose("Player for guild %s already exists, reusing it", guild_id)
                        return player, False
                    LOGGER.verbose("Player for guild %s is being destroyed, waiting for it", guild_id)
                    await player.sequencer.wait_until_idle()
                    self.remove(guild_id, player)
                player = await build()
                self._players[guild_id] = player
                LOGGER.info("Created player for guild %s", guild_id)
                return player, True
        finally:
            self._lock_users[guild_id] -= 1
            if not self._lock_users[guild_id]:
                del self._lock_users[guild_id]
                del self._locks[guild_id]

    async def destroy(self, guild_id: int) -> None:
        """Destroys the player of the guild, nothing happens when there is none."""
        if (player := self._players.get(guild_id)) is None or player.is_destroyed:
            return
        try:
            await player.destroy()
        except PlayerDestroyedException:
            LOGGER.trace("Player for guild %s is already being destroyed", guild_id)

    async def shutdown(self) -> None:
        """Destroys every cached player."""
        LOGGER.info("Destroying %s players", len(self._players))
        for guild_id, player in list(self._players.items()):
            if player.is_destroyed:
                continue
            try:
                await player.destroy()
            except Exception as exc:
                LOGGER.error("Failed to destroy the player of guild %s: %s", guild_id, exc)
                LOGGER.debug("Failed to destroy the player of guild %s", guild_id, exc_info=True)
