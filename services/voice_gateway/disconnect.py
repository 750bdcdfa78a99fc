"""Leave-voice capability used by the voice gateway adapter.

discord.py exposes no "leave voice" operation for connections it does not
manage itself, so leaving is expressed as an explicit capability. The default
implementation sends the low-level voice state update with no channel through
the public ``Guild.change_voice_state`` API. The capability is resolved once
when the adapter is built so that a client library lacking it fails at start
up rather than on the first disconnect.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod

import discord

from services.common.logging import get_logger

from .errors import CapabilityUnavailableError


logger = get_logger(__name__, service_name="voice_gateway")


class VoiceDisconnector(ABC):
    """Disconnects the bot user from voice in a guild."""

    @abstractmethod
    async def disconnect(self, guild: discord.Guild) -> None:
        """Leave whatever voice channel the bot is connected to in ``guild``."""


class GuildVoiceStateDisconnector(VoiceDisconnector):
    """Leaves voice through the guild's voice protocol or a raw voice state update."""

    async def disconnect(self, guild: discord.Guild) -> None:
        voice_client = guild.voice_client
        if voice_client is not None:
            await voice_client.disconnect(force=True)
            return

        await guild.change_voice_state(channel=None)
        logger.debug("voice_gateway.voice_state_cleared", guild_id=guild.id)


def resolve_disconnector(guild_type: type[object] = discord.Guild) -> VoiceDisconnector:
    """Return the default disconnector after checking the client library supports it.

    Raises:
        CapabilityUnavailableError: If ``guild_type`` has no coroutine
            ``change_voice_state`` method.
    """
    change_voice_state = getattr(guild_type, "change_voice_state", None)
    if change_voice_state is None or not inspect.iscoroutinefunction(
        change_voice_state
    ):
        raise CapabilityUnavailableError(
            "leave_voice",
            f"{guild_type.__name__}.change_voice_state is not an awaitable method; "
            "provide a VoiceDisconnector for this client library",
        )
    return GuildVoiceStateDisconnector()
