"""
Central catalog of event names, IPC commands and wire payload shapes.

Design rules:
- Command names are only spelled out here; everything else imports the constants.
- Event names may contain alphanumerics and ``-``, ``/``, ``:``, ``_``.
- Payloads are plain dicts; keys documented here for traceability.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Any, Optional, TypedDict, Union


# -----------------------
# IPC command names
# -----------------------
LISTEN_COMMAND = "plugin:event|listen"
UNLISTEN_COMMAND = "plugin:event|unlisten"
EMIT_COMMAND = "plugin:event|emit"

EVENT_COMMANDS = frozenset({LISTEN_COMMAND, UNLISTEN_COMMAND, EMIT_COMMAND})


# -----------------------
# Reserved event names
# -----------------------
class ReservedEvent(str, Enum):
    """Lifecycle notifications the host may emit without any prior emit from a surface."""

    WINDOW_RESIZED = "tauri://resize"
    WINDOW_MOVED = "tauri://move"
    WINDOW_CLOSE_REQUESTED = "tauri://close-requested"
    WINDOW_DESTROYED = "tauri://destroyed"
    WINDOW_FOCUS = "tauri://focus"
    WINDOW_BLUR = "tauri://blur"
    WINDOW_SCALE_FACTOR_CHANGED = "tauri://scale-change"
    WINDOW_THEME_CHANGED = "tauri://theme-changed"
    WEBVIEW_CREATED = "tauri://webview-created"
    WEBVIEW_FILE_DROP = "tauri://file-drop"
    WEBVIEW_FILE_DROP_HOVER = "tauri://file-drop-hover"
    WEBVIEW_FILE_DROP_CANCELLED = "tauri://file-drop-cancelled"

    def __str__(self) -> str:
        return self.value


EventName = Union[str, ReservedEvent]

_EVENT_NAME_RE = re.compile(r"[A-Za-z0-9\-/:_]+")


def event_name_str(event: EventName) -> str:
    """Plain string form of an event name (reserved members unwrap to their value)."""
    if isinstance(event, ReservedEvent):
        return event.value
    return str(event)


def is_valid_event_name(event: EventName) -> bool:
    """True when the name only uses alphanumerics, ``-``, ``/``, ``:`` and ``_``."""
    return bool(_EVENT_NAME_RE.fullmatch(event_name_str(event)))


# -----------------------
# Payload contracts
# -----------------------
class TargetWire(TypedDict, total=False):
    kind: str           # Global | Window | Webview
    label: str


class ListenArgs(TypedDict):
    event: str
    target: TargetWire
    handler: int


class UnlistenArgs(TypedDict):
    event: str
    eventId: int


class EmitArgs(TypedDict):
    event: str
    target: TargetWire
    payload: Any


class EventWire(TypedDict, total=False):
    event: str
    source: Optional[TargetWire]
    id: int
    payload: Any


__all__ = [
    # commands
    "EMIT_COMMAND",
    "EVENT_COMMANDS",
    "LISTEN_COMMAND",
    "UNLISTEN_COMMAND",
    # names
    "EventName",
    "ReservedEvent",
    "event_name_str",
    "is_valid_event_name",
    # payloads
    "EmitArgs",
    "EventWire",
    "ListenArgs",
    "TargetWire",
    "UnlistenArgs",
]
