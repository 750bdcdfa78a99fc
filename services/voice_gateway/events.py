"""Async broadcast events exposed to the audio orchestration layer."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from services.common.logging import get_logger


T = TypeVar("T")

EventHandler = Callable[[T], Awaitable[None]]

logger = get_logger(__name__, service_name="voice_gateway")


class AsyncEvent(Generic[T]):
    """An ordered broadcast to zero or more async handlers.

    ``emit`` awaits every handler in registration order before returning, so
    two successive emissions are observed by each handler in the same order.
    Emitting with no handlers registered does nothing. Handler exceptions are
    not caught and propagate to the emitter.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: list[EventHandler[T]] = []

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def register_handler(self, handler: EventHandler[T]) -> None:
        """Register a coroutine function to receive every emitted payload."""
        self._handlers.append(handler)
        logger.debug(
            "voice_gateway.event_handler_registered",
            event_name=self.name,
            handler_count=len(self._handlers),
        )

    def unregister_handler(self, handler: EventHandler[T]) -> None:
        """Unregister a handler; unknown handlers are ignored."""
        if handler in self._handlers:
            self._handlers.remove(handler)
            logger.debug(
                "voice_gateway.event_handler_unregistered",
                event_name=self.name,
                handler_count=len(self._handlers),
            )

    async def emit(self, payload: T) -> None:
        """Deliver ``payload`` to all handlers, one after another."""
        # snapshot: handlers may unregister themselves while being notified
        for handler in tuple(self._handlers):
            await handler(payload)

    def __repr__(self) -> str:
        return f"AsyncEvent(name={self.name!r}, handlers={len(self._handlers)})"
