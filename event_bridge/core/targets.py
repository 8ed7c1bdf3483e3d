"""Target resolution: turn an optional scoping directive into a canonical descriptor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from event_bridge.core.errors import InvalidTargetError
from event_bridge.core.event_topics import TargetWire


class TargetKind(str, Enum):
    GLOBAL = "Global"
    WINDOW = "Window"
    WEBVIEW = "Webview"


@dataclass(frozen=True)
class EventTarget:
    """Where an event is scoped to (on listen/emit) or where it came from (on delivery)."""

    kind: TargetKind = TargetKind.GLOBAL
    label: Optional[str] = None

    def __post_init__(self) -> None:
        kind = _parse_kind(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind is TargetKind.GLOBAL:
            object.__setattr__(self, "label", None)

    @classmethod
    def global_(cls) -> "EventTarget":
        return cls(TargetKind.GLOBAL)

    @classmethod
    def window(cls, label: str) -> "EventTarget":
        return cls(TargetKind.WINDOW, label)

    @classmethod
    def webview(cls, label: str) -> "EventTarget":
        return cls(TargetKind.WEBVIEW, label)

    @property
    def is_global(self) -> bool:
        return self.kind is TargetKind.GLOBAL

    def to_wire(self) -> TargetWire:
        if self.is_global:
            return {"kind": TargetKind.GLOBAL.value}
        return {"kind": self.kind.value, "label": self.label or ""}

    @classmethod
    def from_wire(cls, data: Optional[Mapping[str, Any]]) -> "EventTarget":
        if not data:
            return cls.global_()
        kind = _parse_kind(data.get("kind"))
        if kind is TargetKind.GLOBAL:
            return cls.global_()
        return cls(kind, str(data.get("label", "")))

    def __str__(self) -> str:
        if self.is_global:
            return "global"
        return f"{self.kind.value.lower()}:{self.label}"


@dataclass(frozen=True)
class EventOptions:
    """Options accepted by listen/once/emit. Only the target is configurable."""

    target: Optional[EventTarget] = None


TargetDirective = Union[EventOptions, EventTarget, Mapping[str, Any], None]


def _parse_kind(raw: Any) -> TargetKind:
    if isinstance(raw, TargetKind):
        return raw
    if raw is None:
        return TargetKind.GLOBAL
    text = str(raw).strip().lower()
    for kind in TargetKind:
        if kind.value.lower() == text:
            return kind
    raise InvalidTargetError(f"Unknown target kind: {raw!r}")


def resolve_target(options: TargetDirective = None) -> EventTarget:
    """
    Normalize caller options into an EventTarget.

    Accepts ``None``, an ``EventOptions``, an ``EventTarget``, an options mapping
    (``{"target": {"kind": "window", "label": "main"}}``) or a bare target
    mapping (``{"kind": "webview", "label": "main"}``). Labels are passed through
    untouched; an unknown label simply never matches host-side.
    """
    if options is None:
        return EventTarget.global_()
    if isinstance(options, EventTarget):
        return options
    if isinstance(options, EventOptions):
        return options.target or EventTarget.global_()
    if isinstance(options, Mapping):
        if "target" in options:
            return resolve_target(options.get("target"))
        if "kind" in options:
            return EventTarget.from_wire(options)
        return EventTarget.global_()
    raise InvalidTargetError(f"Unsupported target directive: {options!r}")


__all__ = ["EventOptions", "EventTarget", "TargetDirective", "TargetKind", "resolve_target"]
