"""Error taxonomy for the voice gateway adapter.

Every error derives from ``VoiceGatewayError`` and from the builtin exception
that matches its meaning, so callers may catch either.
"""

from __future__ import annotations


class VoiceGatewayError(Exception):
    """Base exception for voice gateway adapter errors."""

    pass


class InvalidArgumentError(VoiceGatewayError, ValueError):
    """Raised for a missing client, an invalid shard count, or an unknown guild or channel."""

    pass


class NotReadyError(VoiceGatewayError, RuntimeError):
    """Raised when gated state is read before the gateway client is ready."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"The underlying discord client is not ready: {reason}")


class ReadyTimeoutError(VoiceGatewayError, TimeoutError):
    """Raised when the gateway client does not resolve its identity in time."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            f"Waited {timeout:g} seconds for the current user to arrive! Make sure "
            "you start the discord client before waiting for the voice gateway "
            "adapter to become ready."
        )


class CapabilityUnavailableError(VoiceGatewayError, RuntimeError):
    """Raised when the client library lacks an operation the adapter depends on."""

    def __init__(self, capability: str, detail: str) -> None:
        self.capability = capability
        super().__init__(f"Capability '{capability}' is unavailable: {detail}")
