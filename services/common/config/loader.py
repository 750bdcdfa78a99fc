"""Environment variable loading utilities for configuration system."""

from __future__ import annotations

from typing import Any, TypeVar

from services.common.config.base import BaseConfig, ConfigError
from services.common.logging import get_logger


C = TypeVar("C", bound=BaseConfig)

logger = get_logger(__name__)


def load_config_from_env(config_class: type[C], **overrides: Any) -> C:
    """Load configuration from environment variables.

    Args:
        config_class: Configuration class to instantiate
        **overrides: Values applied before environment variables

    Returns:
        Configured instance
    """
    try:
        config = config_class(**overrides)
    except ConfigError as exc:
        logger.error(
            "config.load_failed",
            config_class=config_class.__name__,
            error=str(exc),
        )
        raise
    logger.debug(
        "config.loaded",
        config_class=config_class.__name__,
        fields=sorted(config.to_dict()),
    )
    return config
