"""Test fixtures for voice gateway adapter tests."""

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, Mock

import discord
from discord.ext import commands
import pytest

from services.voice_gateway.disconnect import VoiceDisconnector


BOT_USER_ID = 424242424242


@pytest.fixture
def bot_user() -> Mock:
    """Create the bot's own user."""
    user = Mock(spec=discord.ClientUser)
    user.id = BOT_USER_ID
    return user


@pytest.fixture
def bot() -> Mock:
    """Create a single-session bot that has not resolved its user yet."""
    client = Mock(spec=commands.Bot)
    client.user = None
    client.get_guild = Mock(return_value=None)
    return client


@pytest.fixture
def sharded_bot() -> Mock:
    """Create an auto-sharded bot with no shard sessions yet."""
    client = Mock(spec=commands.AutoShardedBot)
    client.user = None
    client.shards = {}
    client.get_guild = Mock(return_value=None)
    return client


@pytest.fixture
def disconnector() -> Mock:
    """Create a leave-voice capability double."""
    mock_disconnector = Mock(spec=VoiceDisconnector)
    mock_disconnector.disconnect = AsyncMock()
    return mock_disconnector


@pytest.fixture
def make_member() -> Callable[..., Mock]:
    """Factory for guild members."""

    def _make_member(user_id: int, *, is_bot: bool = False) -> Mock:
        member = Mock(spec=discord.Member)
        member.id = user_id
        member.bot = is_bot
        return member

    return _make_member


@pytest.fixture
def make_guild() -> Callable[..., Mock]:
    """Factory for guilds holding the given channels."""

    def _make_guild(guild_id: int, channels: list[Any] | None = None) -> Mock:
        guild = Mock(spec=discord.Guild)
        guild.id = guild_id
        by_id = {channel.id: channel for channel in channels or []}
        guild.get_channel = Mock(side_effect=by_id.get)
        guild.voice_client = None
        guild.change_voice_state = AsyncMock()
        for channel in channels or []:
            channel.guild = guild
        return guild

    return _make_guild


@pytest.fixture
def make_voice_channel() -> Callable[..., Mock]:
    """Factory for voice channels with connected members."""

    def _make_voice_channel(channel_id: int, members: list[Mock] | None = None) -> Mock:
        channel = Mock(spec=discord.VoiceChannel)
        channel.id = channel_id
        channel.members = list(members or [])
        channel.connect = AsyncMock()
        return channel

    return _make_voice_channel


@pytest.fixture
def make_voice_state() -> Callable[..., Mock]:
    """Factory for discord.py voice states."""

    def _make_voice_state(
        channel: Mock | None, session_id: str = "session-abc"
    ) -> Mock:
        state = Mock(spec=discord.VoiceState)
        state.channel = channel
        state.session_id = session_id
        return state

    return _make_voice_state


@pytest.fixture
def registered_listener() -> Callable[[Mock, str], Callable[..., Any]]:
    """Return the coroutine the adapter registered on a client for an event."""

    def _registered_listener(client: Mock, name: str) -> Callable[..., Any]:
        for call in client.add_listener.call_args_list:
            func, event_name = call.args
            if event_name == name:
                return func
        raise AssertionError(f"No listener registered for {name}")

    return _registered_listener
