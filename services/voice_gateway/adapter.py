"""
Voice gateway adapter for discord.py clients.

This module adapts an already constructed discord.py bot to the narrow voice
contract the audio orchestration layer depends on: two normalized events
(voice server and voice state updates), readiness-gated identity and shard
information, a channel membership query and a join/move/leave command.
"""

from __future__ import annotations

import asyncio
import functools
from typing import Any

import discord

from services.common.logging import get_logger

from .config import (
    DEFAULT_READY_POLL_INTERVAL_SECONDS,
    DEFAULT_READY_TIMEOUT_SECONDS,
    VoiceGatewayConfig,
)
from .disconnect import VoiceDisconnector, resolve_disconnector
from .errors import InvalidArgumentError, NotReadyError, ReadyTimeoutError
from .events import AsyncEvent
from .models import VoiceServerInfo, VoiceState, VoiceStateUpdateEvent
from .shards import DynamicShardCount, ExplicitShardCount, ShardCountSource
from .voice_protocol import VOICE_SERVER_UPDATE_EVENT, ExternalVoiceProtocol


logger = get_logger(__name__, service_name="voice_gateway")

VoiceChannelTypes = (discord.VoiceChannel, discord.StageChannel)


def _live_shard_count(client: discord.AutoShardedClient) -> int | None:
    shards = client.shards
    if not shards:
        return None
    return len(shards)


class VoiceGatewayAdapter:
    """Adapter between a discord.py bot and the audio orchestration layer.

    The adapter holds a non-owning reference to ``client`` and subscribes to
    its voice events on construction; call ``close`` exactly once to remove
    the subscriptions.

    Shard count resolution:
        - ``shard_count`` given: that value, regardless of the live sessions.
        - no ``shard_count`` and an ``AutoShardedClient``: the number of live
          shard sessions, re-read on every access.
        - no ``shard_count`` and a single-session client: 1.
    """

    def __init__(
        self,
        client: discord.Client,
        shard_count: int | None = None,
        *,
        disconnector: VoiceDisconnector | None = None,
        ready_timeout: float = DEFAULT_READY_TIMEOUT_SECONDS,
        ready_poll_interval: float = DEFAULT_READY_POLL_INTERVAL_SECONDS,
    ) -> None:
        """
        Initialize the adapter and subscribe to the client's voice events.

        Args:
            client: discord.py bot exposing ``add_listener``/``remove_listener``
                (``commands.Bot`` or ``commands.AutoShardedBot``)
            shard_count: Total number of shards, if known up front
            disconnector: Leave-voice capability; resolved from the client
                library when omitted
            ready_timeout: Default bound for ``wait_until_ready`` in seconds
            ready_poll_interval: Delay between readiness checks in seconds

        Raises:
            InvalidArgumentError: If ``client`` is missing or has no listener
                registry, or ``shard_count`` is less than 1
            CapabilityUnavailableError: If no leave-voice capability can be
                resolved for the client library
        """
        if client is None:
            raise InvalidArgumentError("The discord client must not be None.")
        if not callable(getattr(client, "add_listener", None)) or not callable(
            getattr(client, "remove_listener", None)
        ):
            raise InvalidArgumentError(
                f"{type(client).__name__} does not support event listeners; "
                "use discord.ext.commands.Bot or AutoShardedBot."
            )
        if shard_count is not None and shard_count < 1:
            raise InvalidArgumentError(
                f"Shard count must be at least 1, got {shard_count}."
            )
        if ready_poll_interval <= 0:
            raise InvalidArgumentError(
                f"Ready poll interval must be positive, got {ready_poll_interval}."
            )

        self._client = client
        self._shard_source: ShardCountSource = self._build_shard_source(
            client, shard_count
        )
        self._disconnector = (
            disconnector if disconnector is not None else resolve_disconnector()
        )
        self._ready_timeout = ready_timeout
        self._ready_poll_interval = ready_poll_interval

        self.voice_server_updated: AsyncEvent[VoiceServerInfo] = AsyncEvent(
            "voice_server_updated"
        )
        self.voice_state_updated: AsyncEvent[VoiceStateUpdateEvent] = AsyncEvent(
            "voice_state_updated"
        )
        # discord.py runs every dispatched listener in its own task; a lock per
        # event keeps emissions in upstream order (asyncio.Lock wakes FIFO)
        self._voice_server_lock = asyncio.Lock()
        self._voice_state_lock = asyncio.Lock()

        client.add_listener(
            self._on_voice_server_update, f"on_{VOICE_SERVER_UPDATE_EVENT}"
        )
        client.add_listener(self._on_voice_state_update, "on_voice_state_update")

        logger.info(
            "voice_gateway.subscribed",
            client_type=type(client).__name__,
            shard_source=type(self._shard_source).__name__,
        )

    @classmethod
    def from_config(
        cls,
        client: discord.Client,
        config: VoiceGatewayConfig,
        *,
        disconnector: VoiceDisconnector | None = None,
    ) -> VoiceGatewayAdapter:
        """Build an adapter from a ``VoiceGatewayConfig``."""
        return cls(
            client,
            config.shard_count,
            disconnector=disconnector,
            ready_timeout=config.ready_timeout_seconds,
            ready_poll_interval=config.ready_poll_interval_seconds,
        )

    def _build_shard_source(
        self, client: discord.Client, shard_count: int | None
    ) -> ShardCountSource:
        if shard_count is not None:
            return ExplicitShardCount(shard_count)
        if isinstance(client, discord.AutoShardedClient):
            return DynamicShardCount(functools.partial(_live_shard_count, client))
        return ExplicitShardCount(1)

    @property
    def client(self) -> discord.Client:
        return self._client

    @property
    def is_ready(self) -> bool:
        """Whether the client's identity and shard count are both resolved."""
        return (
            self._client.user is not None
            and self._shard_source.resolve() is not None
        )

    @property
    def current_user_id(self) -> int:
        """Snowflake id of the bot user.

        Raises:
            NotReadyError: If the client is not ready yet
        """
        self._ensure_available()
        return self._client.user.id  # type: ignore[union-attr]

    @property
    def shard_count(self) -> int:
        """Total number of shards the bot uses.

        Raises:
            NotReadyError: If the client is not ready yet
        """
        self._ensure_available()
        return self._shard_source.resolve()  # type: ignore[return-value]

    def _ensure_available(self) -> None:
        if self._client.user is None:
            raise NotReadyError("current user has not been resolved")
        # a client can know its user before its shard sessions are listed
        if self._shard_source.resolve() is None:
            raise NotReadyError("shard sessions have not been populated")

    async def wait_until_ready(self, timeout: float | None = None) -> None:
        """Wait until the client has resolved its current user.

        The client is polled rather than awaited through an event because it
        does not announce readiness on every code path (e.g. resumed sessions).

        Args:
            timeout: Maximum time to wait in seconds; defaults to the
                configured ready timeout

        Raises:
            ReadyTimeoutError: If the current user is still unknown after
                ``timeout`` seconds
        """
        if timeout is None:
            timeout = self._ready_timeout
        if timeout < 0:
            raise InvalidArgumentError(f"Timeout must not be negative, got {timeout}.")

        loop = asyncio.get_running_loop()
        started = loop.time()

        while self._client.user is None:
            await asyncio.sleep(self._ready_poll_interval)

            if loop.time() - started > timeout:
                logger.warning("voice_gateway.ready_timeout", timeout_seconds=timeout)
                raise ReadyTimeoutError(timeout)

        logger.info(
            "voice_gateway.ready",
            user_id=self._client.user.id,
            waited_seconds=round(loop.time() - started, 3),
        )

    async def get_channel_users(
        self, guild_id: int, voice_channel_id: int
    ) -> list[int]:
        """Return the ids of the non-bot users connected to a voice channel.

        A guild or channel that cannot be found yields an empty list: it may
        have been deleted while a player still referenced it.
        """
        guild = self._client.get_guild(guild_id)
        if guild is None:
            logger.debug("voice_gateway.channel_users_guild_missing", guild_id=guild_id)
            return []

        channel = self._get_voice_channel(guild, voice_channel_id)
        if channel is None:
            logger.debug(
                "voice_gateway.channel_users_channel_missing",
                guild_id=guild_id,
                channel_id=voice_channel_id,
            )
            return []

        return list(
            dict.fromkeys(member.id for member in channel.members if not member.bot)
        )

    async def send_voice_update(
        self,
        guild_id: int,
        voice_channel_id: int | None = None,
        self_deaf: bool = False,
        self_mute: bool = False,
    ) -> None:
        """Join, move to or leave a voice channel.

        Args:
            guild_id: Guild to update the bot's voice state in
            voice_channel_id: Voice channel to join; ``None`` leaves voice
            self_deaf: Whether the bot should be self deafened
            self_mute: Whether the bot should be self muted

        Raises:
            InvalidArgumentError: If the guild, or the given channel within
                it, is unknown or inaccessible
        """
        guild = self._client.get_guild(guild_id)
        if guild is None:
            raise InvalidArgumentError(f"Invalid or inaccessible guild: {guild_id}")

        if voice_channel_id is None:
            await self._disconnector.disconnect(guild)
            logger.info("voice_gateway.voice_leave_sent", guild_id=guild_id)
            return

        channel = self._get_voice_channel(guild, voice_channel_id)
        if channel is None:
            raise InvalidArgumentError(
                f"Invalid or inaccessible voice channel: {voice_channel_id}"
            )

        voice_client = guild.voice_client
        if isinstance(voice_client, ExternalVoiceProtocol):
            await voice_client.move_to(
                channel, self_deaf=self_deaf, self_mute=self_mute
            )
        else:
            if voice_client is not None:
                # voice server updates are only routed to the guild's voice
                # client, so any other protocol has to go first
                await voice_client.disconnect(force=True)
                logger.info(
                    "voice_gateway.foreign_voice_client_replaced",
                    guild_id=guild_id,
                    voice_client_type=type(voice_client).__name__,
                )
            await channel.connect(
                cls=ExternalVoiceProtocol, self_deaf=self_deaf, self_mute=self_mute
            )

        logger.info(
            "voice_gateway.voice_join_sent",
            guild_id=guild_id,
            channel_id=voice_channel_id,
            self_deaf=self_deaf,
            self_mute=self_mute,
        )

    def close(self) -> None:
        """Remove the listeners registered on the client."""
        self._client.remove_listener(
            self._on_voice_server_update, f"on_{VOICE_SERVER_UPDATE_EVENT}"
        )
        self._client.remove_listener(
            self._on_voice_state_update, "on_voice_state_update"
        )
        logger.info("voice_gateway.closed")

    @staticmethod
    def _get_voice_channel(
        guild: discord.Guild, channel_id: int
    ) -> discord.VoiceChannel | discord.StageChannel | None:
        channel = guild.get_channel(channel_id)
        if isinstance(channel, VoiceChannelTypes):
            return channel
        return None

    async def _on_voice_server_update(self, data: Any) -> None:
        info = VoiceServerInfo(
            guild_id=int(data["guild_id"]),
            token=data["token"],
            endpoint=data["endpoint"],
        )
        async with self._voice_server_lock:
            await self.voice_server_updated.emit(info)

    async def _on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        # a user leaving voice has no channel afterwards, so the guild is
        # taken from the channel being left
        source_channel = before.channel if before.channel is not None else after.channel
        if source_channel is None:
            logger.debug("voice_gateway.voice_state_without_channel", user_id=member.id)
            return

        state = VoiceState(
            voice_channel_id=after.channel.id if after.channel is not None else None,
            guild_id=source_channel.guild.id,
            voice_session_id=after.session_id,  # type: ignore[arg-type]
        )
        async with self._voice_state_lock:
            await self.voice_state_updated.emit(
                VoiceStateUpdateEvent(user_id=member.id, state=state)
            )

    def __repr__(self) -> str:
        return (
            f"VoiceGatewayAdapter(client={type(self._client).__name__}, "
            f"shard_source={type(self._shard_source).__name__})"
        )
