"""Voice gateway adapter configuration using the shared config library."""

from __future__ import annotations

from services.common.config import (
    BaseConfig,
    FieldDefinition,
    LoggingConfig,
    load_config_from_env,
)
from services.common.logging import configure_logging


DEFAULT_READY_TIMEOUT_SECONDS = 10.0
DEFAULT_READY_POLL_INTERVAL_SECONDS = 0.01


class VoiceGatewayConfig(BaseConfig):
    """Settings for readiness polling and shard count resolution."""

    @classmethod
    def get_field_definitions(cls) -> list[FieldDefinition]:
        return [
            FieldDefinition(
                name="shard_count",
                field_type=int,
                default=None,
                description="Total shard count; resolved from the client when unset",
                env_var="VOICE_GATEWAY_SHARD_COUNT",
                min_value=1,
            ),
            FieldDefinition(
                name="ready_timeout_seconds",
                field_type=float,
                default=DEFAULT_READY_TIMEOUT_SECONDS,
                description="Maximum time to wait for the client's current user",
                env_var="VOICE_GATEWAY_READY_TIMEOUT_SECONDS",
                min_value=0.0,
                max_value=300.0,
            ),
            FieldDefinition(
                name="ready_poll_interval_seconds",
                field_type=float,
                default=DEFAULT_READY_POLL_INTERVAL_SECONDS,
                description="Interval between readiness checks",
                env_var="VOICE_GATEWAY_READY_POLL_INTERVAL_SECONDS",
                min_value=0.001,
                max_value=5.0,
            ),
        ]


def load_config() -> VoiceGatewayConfig:
    """Load voice gateway configuration from the environment."""
    return load_config_from_env(VoiceGatewayConfig)


def load_logging_config() -> LoggingConfig:
    """Load logging configuration from the environment."""
    return load_config_from_env(LoggingConfig)


def configure_service_logging(config: LoggingConfig | None = None) -> LoggingConfig:
    """Install structured logging for the voice gateway process."""
    logging_config = config if config is not None else load_logging_config()
    configure_logging(
        logging_config.level,
        json_logs=logging_config.json_logs,
        service_name=logging_config.service_name,
    )
    return logging_config


__all__ = [
    "DEFAULT_READY_POLL_INTERVAL_SECONDS",
    "DEFAULT_READY_TIMEOUT_SECONDS",
    "LoggingConfig",
    "VoiceGatewayConfig",
    "configure_service_logging",
    "load_config",
    "load_logging_config",
]
