"""Exception hierarchy shared by the client, the callback arena and the mock host."""

from __future__ import annotations

from typing import Optional


class EventBridgeError(Exception):
    """Base class for every error raised by event_bridge itself."""


class IpcError(EventBridgeError):
    """A command sent across the boundary was rejected by the host."""

    def __init__(self, message: str, *, command: Optional[str] = None) -> None:
        super().__init__(message)
        self.command = command

    def __str__(self) -> str:
        base = super().__str__()
        if self.command:
            return f"{self.command}: {base}"
        return base


class InvalidEventNameError(EventBridgeError, ValueError):
    pass


class InvalidTargetError(EventBridgeError, ValueError):
    pass


class ClientNotConfiguredError(EventBridgeError, RuntimeError):
    """Module-level helpers were used before a default client was installed."""


__all__ = [
    "ClientNotConfiguredError",
    "EventBridgeError",
    "InvalidEventNameError",
    "InvalidTargetError",
    "IpcError",
]
