"""Configuration system for voice-gateway services.

This module provides:
- Declarative, type-checked configuration classes
- Environment variable overrides
- Validation framework
"""

from .base import (
    BaseConfig,
    ConfigError,
    FieldDefinition,
    LoggingConfig,
    RequiredFieldError,
    ValidationError,
)
from .loader import load_config_from_env


__all__ = [
    "BaseConfig",
    "ConfigError",
    "ValidationError",
    "RequiredFieldError",
    "FieldDefinition",
    "LoggingConfig",
    "load_config_from_env",
]
