"""Value types delivered to handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, TypeVar

from event_bridge.core.event_topics import EventWire
from event_bridge.core.targets import EventTarget

T = TypeVar("T")


@dataclass(frozen=True)
class Event(Generic[T]):
    """One delivered occurrence of an event, as seen by a handler."""

    event: str
    source: EventTarget
    id: int  # subscription id that matched; used for self-unregistration
    payload: T

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> "Event[Any]":
        return cls(
            event=str(data["event"]),
            source=EventTarget.from_wire(data.get("source")),
            id=int(data["id"]),
            payload=data.get("payload"),
        )

    def to_wire(self) -> EventWire:
        return {
            "event": self.event,
            "source": self.source.to_wire(),
            "id": self.id,
            "payload": self.payload,
        }


__all__ = ["Event"]
