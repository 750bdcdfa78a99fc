"""Externally managed voice connection for discord.py clients.

discord.py only forwards VOICE_SERVER_UPDATE payloads to the voice protocol
registered for a guild and never dispatches them as a client event. The
protocol below takes the place of ``discord.VoiceClient`` when the audio
transport is handled elsewhere: it only drives the gateway voice state and
re-dispatches voice server payloads so that listeners can observe them.
"""

from __future__ import annotations

from typing import Any

import discord

from services.common.logging import get_logger


VOICE_SERVER_UPDATE_EVENT = "voice_server_update"

logger = get_logger(__name__, service_name="voice_gateway")


class ExternalVoiceProtocol(discord.VoiceProtocol):
    """Voice protocol that leaves the voice connection to an external node."""

    def __init__(
        self, client: discord.Client, channel: discord.abc.Connectable
    ) -> None:
        super().__init__(client, channel)
        self.guild: discord.Guild = channel.guild  # type: ignore[attr-defined]
        self.self_deaf = False
        self.self_mute = False

    async def connect(
        self,
        *,
        timeout: float,
        reconnect: bool,
        self_deaf: bool = False,
        self_mute: bool = False,
    ) -> None:
        await self._change_voice_state(
            self.channel, self_deaf=self_deaf, self_mute=self_mute
        )
        logger.info(
            "voice_gateway.external_voice_connect",
            guild_id=self.guild.id,
            channel_id=self.channel.id,
            self_deaf=self_deaf,
            self_mute=self_mute,
        )

    async def move_to(
        self,
        channel: discord.abc.Snowflake,
        *,
        self_deaf: bool = False,
        self_mute: bool = False,
    ) -> None:
        """Move the bot to ``channel`` within the same guild."""
        await self._change_voice_state(
            channel, self_deaf=self_deaf, self_mute=self_mute
        )
        self.channel = channel  # type: ignore[assignment]
        logger.info(
            "voice_gateway.external_voice_move",
            guild_id=self.guild.id,
            channel_id=channel.id,
        )

    async def disconnect(self, *, force: bool = False) -> None:
        await self.guild.change_voice_state(channel=None)
        self.cleanup()
        logger.info(
            "voice_gateway.external_voice_disconnect",
            guild_id=self.guild.id,
            force=force,
        )

    async def on_voice_server_update(self, data: Any) -> None:
        if data.get("endpoint") is None:
            # the voice server is being reallocated; a new update follows
            logger.debug(
                "voice_gateway.voice_server_pending",
                guild_id=data.get("guild_id"),
            )
            return
        self.client.dispatch(VOICE_SERVER_UPDATE_EVENT, data)

    async def on_voice_state_update(self, data: Any) -> None:
        channel_id = data.get("channel_id")
        if channel_id is None:
            # the bot left voice, possibly disconnected by a moderator
            self.cleanup()
            return

        channel = self.guild.get_channel(int(channel_id))
        if channel is not None:
            self.channel = channel  # type: ignore[assignment]
        self.self_deaf = bool(data.get("self_deaf", self.self_deaf))
        self.self_mute = bool(data.get("self_mute", self.self_mute))

    async def _change_voice_state(
        self,
        channel: discord.abc.Snowflake,
        *,
        self_deaf: bool,
        self_mute: bool,
    ) -> None:
        await self.guild.change_voice_state(
            channel=channel, self_deaf=self_deaf, self_mute=self_mute
        )
        self.self_deaf = self_deaf
        self.self_mute = self_mute
