"""Normalized voice gateway event payloads."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class VoiceServerInfo:
    """Voice server assignment for a guild."""

    guild_id: int
    token: str
    endpoint: str


@dataclass(frozen=True, slots=True)
class VoiceState:
    """Voice state of a single user within a guild.

    ``voice_channel_id`` is ``None`` when the user is not connected to any
    voice channel of the guild, e.g. right after disconnecting.
    """

    voice_channel_id: int | None
    guild_id: int
    voice_session_id: str

    @property
    def is_connected(self) -> bool:
        return self.voice_channel_id is not None


@dataclass(frozen=True, slots=True)
class VoiceStateUpdateEvent:
    """A user paired with their new voice state."""

    user_id: int
    state: VoiceState
