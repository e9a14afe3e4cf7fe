from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from pycadence.enums.player import PlayerMovedState
from pycadence.events.player import PlayerMovedEvent
from pycadence.logging import getLogger

if TYPE_CHECKING:
    from discord.ext import commands

    from pycadence.core.client import Client

LOGGER = getLogger("PyCadence.PlayerMovedWatcher")


class PlayerMovedWatcher:
    """Reports voice channel changes of the bot itself as :class:`PlayerMovedEvent`.

    Moves done by someone else, for example a moderator dragging the bot, do not go
    through :meth:`Player.set_voice_channel`, so the player learns about them here.
    """

    __slots__ = ("bot", "client", "_loaded")

    def __init__(self, bot: commands.Bot, client: Client) -> None:
        self.bot = bot
        self.client = client
        self._loaded = False

    def load(self) -> None:
        if self._loaded:
            return
        self.bot.add_listener(self.on_voice_state_update, name="on_voice_state_update")
        self._loaded = True
        LOGGER.debug("Listening to voice state updates")

    def unload(self) -> None:
        if not self._loaded:
            return
        self.bot.remove_listener(self.on_voice_state_update, name="on_voice_state_update")
        self._loaded = False
        LOGGER.debug("Stopped listening to voice state updates")

    async def on_voice_state_update(
        self, member: discord.Member, before: discord.VoiceState, after: discord.VoiceState
    ) -> None:
        if self.bot.user is None or member.id != self.bot.user.id:
            return
        if (player := self.client.get_player(member.guild.id)) is None or player.is_destroyed:
            return
        before_id = before.channel.id if before.channel is not None else None
        after_id = after.channel.id if after.channel is not None else None
        if before_id == after_id:
            return
        if before_id is None:
            state = PlayerMovedState.JOINED
        elif after_id is None:
            state = PlayerMovedState.LEFT
        else:
            state = PlayerMovedState.MOVED
            player.sync_voice_id(after_id)
        LOGGER.verbose("Player for guild %s %s voice channel %s -> %s", member.guild.id, state.value, before_id, after_id)
        player.dispatch_event(PlayerMovedEvent(player, state, before_id, after_id))
