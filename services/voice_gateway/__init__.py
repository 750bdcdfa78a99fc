"""Voice gateway adapter between discord.py and the audio orchestration layer."""

from .adapter import VoiceGatewayAdapter
from .config import VoiceGatewayConfig, configure_service_logging, load_config
from .disconnect import GuildVoiceStateDisconnector, VoiceDisconnector
from .errors import (
    CapabilityUnavailableError,
    InvalidArgumentError,
    NotReadyError,
    ReadyTimeoutError,
    VoiceGatewayError,
)
from .events import AsyncEvent
from .filters import EqualizerBand, EqualizerFilterOptions
from .models import VoiceServerInfo, VoiceState, VoiceStateUpdateEvent
from .voice_protocol import ExternalVoiceProtocol


__all__ = [
    "AsyncEvent",
    "CapabilityUnavailableError",
    "EqualizerBand",
    "EqualizerFilterOptions",
    "ExternalVoiceProtocol",
    "GuildVoiceStateDisconnector",
    "InvalidArgumentError",
    "NotReadyError",
    "ReadyTimeoutError",
    "VoiceDisconnector",
    "VoiceGatewayAdapter",
    "VoiceGatewayConfig",
    "VoiceGatewayError",
    "VoiceServerInfo",
    "VoiceState",
    "VoiceStateUpdateEvent",
    "configure_service_logging",
    "load_config",
]
