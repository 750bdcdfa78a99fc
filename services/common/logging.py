"""Centralized logging utilities for voice-gateway services."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import IO, Any

import structlog


def _numeric_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if isinstance(value, int):
        return value
    return logging.INFO


Processor = Callable[[Any, str, dict[str, Any]], dict[str, Any]]


def _add_service(service_name: str | None) -> Processor:
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        if service_name and "service" not in event_dict:
            event_dict["service"] = service_name
        return event_dict

    return processor


def configure_logging(
    level: str = "INFO",
    *,
    json_logs: bool = True,
    service_name: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Route structlog and stdlib records through one formatter on the root logger.

    Args:
        level: Root log level name; unknown names fall back to INFO
        json_logs: Render JSON lines when true, console output otherwise
        service_name: Added as ``service`` to records that do not carry one
        stream: Destination for rendered records, ``sys.stdout`` by default
    """

    numeric_level = _numeric_level(level)
    output_stream = stream if stream is not None else sys.stdout

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        _add_service(service_name),
        structlog.processors.dict_tracebacks,
    ]
    if json_logs:
        formatter_processors = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ]
    else:
        formatter_processors = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(),
        ]

    handler = logging.StreamHandler(output_stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=formatter_processors,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)

    # Gateway heartbeat and HTTP chatter from discord.py
    logging.getLogger("discord.gateway").setLevel(logging.INFO)
    logging.getLogger("discord.http").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    name: str,
    *,
    service_name: str | None = None,
    **initial_values: Any,
) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound with standard metadata.

    The logger is resolved lazily on first use, so module-level loggers pick
    up the configuration installed later by ``configure_logging``.
    """

    if service_name:
        initial_values.setdefault("service", service_name)
    return structlog.stdlib.get_logger(name, **initial_values)


__all__ = [
    "configure_logging",
    "get_logger",
]
