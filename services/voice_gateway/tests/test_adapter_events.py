"""Tests for translating discord.py voice events into adapter events."""

import asyncio

import discord
from discord.ext import commands
import pytest

from services.voice_gateway.adapter import VoiceGatewayAdapter
from services.voice_gateway.models import (
    VoiceServerInfo,
    VoiceState,
    VoiceStateUpdateEvent,
)


GUILD_ID = 1001
OTHER_GUILD_ID = 1002
USER_ID = 5150


async def _started_bot() -> commands.Bot:
    """Create a real bot bound to the running loop so dispatch schedules tasks."""
    live_bot = commands.Bot(command_prefix="!", intents=discord.Intents.none())
    await live_bot._async_setup_hook()
    return live_bot


@pytest.fixture
def adapter(bot, disconnector):
    return VoiceGatewayAdapter(bot, disconnector=disconnector)


@pytest.fixture
def voice_state_listener(bot, adapter, registered_listener):
    return registered_listener(bot, "on_voice_state_update")


@pytest.fixture
def voice_server_listener(bot, adapter, registered_listener):
    return registered_listener(bot, "on_voice_server_update")


@pytest.fixture
def received(adapter):
    events: list[VoiceStateUpdateEvent] = []

    async def collect(event: VoiceStateUpdateEvent) -> None:
        events.append(event)

    adapter.voice_state_updated.register_handler(collect)
    return events


@pytest.mark.unit
@pytest.mark.asyncio
class TestVoiceServerUpdated:
    """Test voice server update translation."""

    async def test_emits_voice_server_info(self, adapter, voice_server_listener):
        received: list[VoiceServerInfo] = []

        async def collect(info: VoiceServerInfo) -> None:
            received.append(info)

        adapter.voice_server_updated.register_handler(collect)

        await voice_server_listener(
            {
                "guild_id": str(GUILD_ID),
                "token": "voice-token",
                "endpoint": "us-east1.discord.media:443",
            }
        )

        assert received == [
            VoiceServerInfo(
                guild_id=GUILD_ID,
                token="voice-token",
                endpoint="us-east1.discord.media:443",
            )
        ]

    async def test_no_handlers_is_noop(self, adapter, voice_server_listener):
        assert adapter.voice_server_updated.handler_count == 0

        await voice_server_listener(
            {"guild_id": str(GUILD_ID), "token": "t", "endpoint": "e"}
        )


@pytest.mark.unit
@pytest.mark.asyncio
class TestVoiceStateUpdated:
    """Test voice state update translation."""

    async def test_leave_takes_guild_from_previous_channel(
        self,
        voice_state_listener,
        received,
        make_guild,
        make_voice_channel,
        make_member,
        make_voice_state,
    ):
        left_channel = make_voice_channel(2001)
        make_guild(GUILD_ID, [left_channel])

        await voice_state_listener(
            make_member(USER_ID),
            make_voice_state(left_channel, "old-session"),
            make_voice_state(None, "new-session"),
        )

        assert received == [
            VoiceStateUpdateEvent(
                user_id=USER_ID,
                state=VoiceState(
                    voice_channel_id=None,
                    guild_id=GUILD_ID,
                    voice_session_id="new-session",
                ),
            )
        ]
        assert not received[0].state.is_connected

    async def test_join_takes_guild_from_new_channel(
        self,
        voice_state_listener,
        received,
        make_guild,
        make_voice_channel,
        make_member,
        make_voice_state,
    ):
        joined_channel = make_voice_channel(2002)
        make_guild(OTHER_GUILD_ID, [joined_channel])

        await voice_state_listener(
            make_member(USER_ID),
            make_voice_state(None),
            make_voice_state(joined_channel, "joined-session"),
        )

        assert received == [
            VoiceStateUpdateEvent(
                user_id=USER_ID,
                state=VoiceState(
                    voice_channel_id=2002,
                    guild_id=OTHER_GUILD_ID,
                    voice_session_id="joined-session",
                ),
            )
        ]

    async def test_move_prefers_previous_channel_guild(
        self,
        voice_state_listener,
        received,
        make_guild,
        make_voice_channel,
        make_member,
        make_voice_state,
    ):
        from_channel = make_voice_channel(2001)
        to_channel = make_voice_channel(2003)
        make_guild(GUILD_ID, [from_channel])
        make_guild(OTHER_GUILD_ID, [to_channel])

        await voice_state_listener(
            make_member(USER_ID),
            make_voice_state(from_channel),
            make_voice_state(to_channel),
        )

        assert received[0].state.guild_id == GUILD_ID
        assert received[0].state.voice_channel_id == 2003

    async def test_no_channel_on_either_side_is_skipped(
        self, voice_state_listener, received, make_member, make_voice_state
    ):
        await voice_state_listener(
            make_member(USER_ID), make_voice_state(None), make_voice_state(None)
        )

        assert received == []

    async def test_dispatch_preserves_upstream_order(
        self, disconnector, make_guild, make_voice_channel, make_member, make_voice_state
    ):
        live_bot = await _started_bot()
        adapter = VoiceGatewayAdapter(live_bot, disconnector=disconnector)
        first_channel = make_voice_channel(2001)
        second_channel = make_voice_channel(2002)
        make_guild(GUILD_ID, [first_channel, second_channel])
        observed: list[int | None] = []
        both_seen = asyncio.Event()

        async def slow_on_first_join(event: VoiceStateUpdateEvent) -> None:
            if event.state.voice_channel_id == 2001:
                await asyncio.sleep(0.05)

        async def record(event: VoiceStateUpdateEvent) -> None:
            observed.append(event.state.voice_channel_id)
            if len(observed) == 2:
                both_seen.set()

        adapter.voice_state_updated.register_handler(slow_on_first_join)
        adapter.voice_state_updated.register_handler(record)
        member = make_member(USER_ID)

        live_bot.dispatch(
            "voice_state_update",
            member,
            make_voice_state(None),
            make_voice_state(first_channel),
        )
        live_bot.dispatch(
            "voice_state_update",
            member,
            make_voice_state(first_channel),
            make_voice_state(second_channel),
        )
        await asyncio.wait_for(both_seen.wait(), timeout=2.0)

        assert observed == [2001, 2002]
        adapter.close()

    async def test_dispatch_preserves_voice_server_order(self, disconnector):
        live_bot = await _started_bot()
        adapter = VoiceGatewayAdapter(live_bot, disconnector=disconnector)
        observed: list[str] = []
        both_seen = asyncio.Event()

        async def slow_on_first_token(info: VoiceServerInfo) -> None:
            if info.token == "first":
                await asyncio.sleep(0.05)

        async def record(info: VoiceServerInfo) -> None:
            observed.append(info.token)
            if len(observed) == 2:
                both_seen.set()

        adapter.voice_server_updated.register_handler(slow_on_first_token)
        adapter.voice_server_updated.register_handler(record)

        for token in ("first", "second"):
            live_bot.dispatch(
                "voice_server_update",
                {"guild_id": str(GUILD_ID), "token": token, "endpoint": "e:443"},
            )
        await asyncio.wait_for(both_seen.wait(), timeout=2.0)

        assert observed == ["first", "second"]
        adapter.close()

    async def test_listener_returns_after_all_handlers_complete(
        self,
        adapter,
        voice_state_listener,
        make_guild,
        make_voice_channel,
        make_member,
        make_voice_state,
    ):
        channel = make_voice_channel(2001)
        make_guild(GUILD_ID, [channel])
        completed: list[str] = []

        async def first(event: VoiceStateUpdateEvent) -> None:
            await asyncio.sleep(0.01)
            completed.append("first")

        async def second(event: VoiceStateUpdateEvent) -> None:
            completed.append("second")

        adapter.voice_state_updated.register_handler(first)
        adapter.voice_state_updated.register_handler(second)

        await voice_state_listener(
            make_member(USER_ID), make_voice_state(None), make_voice_state(channel)
        )

        assert completed == ["first", "second"]

    async def test_handler_errors_propagate(
        self,
        adapter,
        voice_state_listener,
        make_guild,
        make_voice_channel,
        make_member,
        make_voice_state,
    ):
        channel = make_voice_channel(2001)
        make_guild(GUILD_ID, [channel])

        async def failing(event: VoiceStateUpdateEvent) -> None:
            raise RuntimeError("player gone")

        adapter.voice_state_updated.register_handler(failing)

        with pytest.raises(RuntimeError, match="player gone"):
            await voice_state_listener(
                make_member(USER_ID), make_voice_state(None), make_voice_state(channel)
            )

    async def test_closed_adapter_unregisters_listener(
        self, bot, adapter, voice_state_listener
    ):
        adapter.close()

        bot.remove_listener.assert_any_call(
            voice_state_listener, "on_voice_state_update"
        )
