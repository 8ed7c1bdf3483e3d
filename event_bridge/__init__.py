"""Cross-boundary event subscription client: listen, once and emit over an async IPC channel."""

from __future__ import annotations

from event_bridge.core.errors import (
    ClientNotConfiguredError,
    EventBridgeError,
    InvalidEventNameError,
    InvalidTargetError,
    IpcError,
)
from event_bridge.core.event_api import (
    EventClient,
    emit,
    get_default_client,
    listen,
    once,
    reset_default_client,
    set_default_client,
)
from event_bridge.core.event_topics import ReservedEvent, is_valid_event_name
from event_bridge.core.models import Event
from event_bridge.core.targets import EventOptions, EventTarget, TargetKind, resolve_target
from event_bridge.runtime import EventBridgeRuntime

__all__ = [
    "ClientNotConfiguredError",
    "Event",
    "EventBridgeError",
    "EventClient",
    "EventBridgeRuntime",
    "EventOptions",
    "EventTarget",
    "InvalidEventNameError",
    "InvalidTargetError",
    "IpcError",
    "ReservedEvent",
    "TargetKind",
    "emit",
    "get_default_client",
    "is_valid_event_name",
    "listen",
    "once",
    "reset_default_client",
    "resolve_target",
    "set_default_client",
]
