"""
In-process stand-in for the host side of the event channel.

``MockHost`` answers the three event commands for any number of connected
surfaces and fans emitted events out to matching subscriptions through each
surface's callback arena. Payloads go through a JSON round trip on the way, so
anything that would not survive the real boundary is rejected here too.

Usage::

    host = MockHost()
    main = host.connect(EventTarget.window("main"))
    client = main.client()
    await client.listen("ping", handler)
    await host.emit_from_host("ping", {"n": 1})
"""

from __future__ import annotations

import asyncio
import itertools
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple

from event_bridge.core.callbacks import CallbackRegistry
from event_bridge.core.error_engine import ErrorEngine
from event_bridge.core.errors import IpcError
from event_bridge.core.event_api import EventClient
from event_bridge.core.event_topics import (
    EMIT_COMMAND,
    EVENT_COMMANDS,
    LISTEN_COMMAND,
    UNLISTEN_COMMAND,
    EmitArgs,
    EventName,
    ListenArgs,
    UnlistenArgs,
    event_name_str,
    is_valid_event_name,
)
from event_bridge.core.logging_utils import get_logger
from event_bridge.core.targets import EventTarget

_logger = get_logger("testing")


@dataclass(frozen=True)
class HostSubscription:
    id: int
    event: str
    target: EventTarget
    handler: int
    connection: "HostConnection"


class HostConnection:
    """One surface's view of the host: an ``invoke`` primitive plus its callback arena."""

    def __init__(self, host: "MockHost", source: EventTarget, callbacks: CallbackRegistry) -> None:
        self.host = host
        self.source = source
        self.callbacks = callbacks

    async def invoke(self, command: str, args: Mapping[str, Any]) -> Any:
        return await self.host.handle(self, command, args)

    def client(self, *, error_engine: Optional[ErrorEngine] = None) -> EventClient:
        return EventClient(self.invoke, self.callbacks.register, error_engine=error_engine)

    def __repr__(self) -> str:
        return f"HostConnection(source={self.source})"


class MockHost:
    def __init__(self, *, error_engine: Optional[ErrorEngine] = None) -> None:
        self._subscriptions: Dict[int, HostSubscription] = {}
        self._ids: Iterator[int] = itertools.count(1)
        self._closed = False
        self._failures: Dict[str, Exception] = {}
        self._stalled: Set[str] = set()
        self.error_engine = error_engine or ErrorEngine()
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    # --------------------------
    # Surfaces
    # --------------------------
    def connect(
        self,
        source: Optional[EventTarget] = None,
        callbacks: Optional[CallbackRegistry] = None,
    ) -> HostConnection:
        return HostConnection(self, source or EventTarget.global_(), callbacks or CallbackRegistry())

    # --------------------------
    # Failure simulation
    # --------------------------
    def close(self) -> None:
        """Every later command is rejected, as if the host had been torn down."""
        self._closed = True

    def fail_command(self, command: str, error: Optional[Exception] = None) -> None:
        self._failures[command] = error or IpcError("simulated failure", command=command)

    def stall_command(self, command: str) -> None:
        """Accept ``command`` but never answer it, like a host that went silent."""
        self._stalled.add(command)

    def restore_command(self, command: str) -> None:
        self._failures.pop(command, None)
        self._stalled.discard(command)

    # --------------------------
    # Inspection
    # --------------------------
    def subscription_count(self, event: Optional[EventName] = None) -> int:
        if event is None:
            return len(self._subscriptions)
        name = event_name_str(event)
        return sum(1 for sub in self._subscriptions.values() if sub.event == name)

    def subscriptions(self) -> List[HostSubscription]:
        return list(self._subscriptions.values())

    def commands(self, command: Optional[str] = None) -> List[Dict[str, Any]]:
        return [args for name, args in self.calls if command is None or name == command]

    # --------------------------
    # Command handling
    # --------------------------
    async def handle(self, connection: HostConnection, command: str, args: Mapping[str, Any]) -> Any:
        self.calls.append((command, dict(args)))
        if self._closed:
            raise IpcError("host is closed", command=command)
        if command not in EVENT_COMMANDS:
            raise IpcError("unknown command", command=command)
        if command in self._failures:
            raise self._failures[command]
        if command in self._stalled:
            await asyncio.Event().wait()

        if command == LISTEN_COMMAND:
            return await self._listen(connection, args)  # type: ignore[arg-type]
        if command == UNLISTEN_COMMAND:
            return await self._unlisten(connection, args)  # type: ignore[arg-type]
        return await self._emit(connection, args)  # type: ignore[arg-type]

    def _check_name(self, command: str, event: Any) -> str:
        if not isinstance(event, str) or not is_valid_event_name(event):
            raise IpcError(
                f"invalid event name {event!r}: only alphanumeric, '-', '/', ':' and '_' are allowed",
                command=command,
            )
        return event

    async def _listen(self, connection: HostConnection, args: ListenArgs) -> int:
        event = self._check_name(LISTEN_COMMAND, args.get("event"))
        subscription = HostSubscription(
            id=next(self._ids),
            event=event,
            target=EventTarget.from_wire(args.get("target")),
            handler=int(args["handler"]),
            connection=connection,
        )
        self._subscriptions[subscription.id] = subscription
        return subscription.id

    async def _unlisten(self, connection: HostConnection, args: UnlistenArgs) -> None:
        event = self._check_name(UNLISTEN_COMMAND, args.get("event"))
        event_id = int(args["eventId"])
        existing = self._subscriptions.get(event_id)
        # unknown or already removed ids are a no-op
        if existing is not None and existing.event == event:
            del self._subscriptions[event_id]

    async def _emit(self, connection: HostConnection, args: EmitArgs) -> None:
        event = self._check_name(EMIT_COMMAND, args.get("event"))
        target = EventTarget.from_wire(args.get("target"))
        await self._deliver(event, args.get("payload"), target, connection.source)

    # --------------------------
    # Delivery
    # --------------------------
    async def emit_from_host(
        self,
        event: EventName,
        payload: Any = None,
        target: Optional[EventTarget] = None,
        *,
        repeat: int = 1,
    ) -> int:
        """
        Emit from the host itself (e.g. a lifecycle notification).

        ``repeat`` delivers the same occurrence several times to every
        subscription that matched when the emit started, the way an
        at-least-once channel can. Returns the number of successful deliveries.
        """
        name = self._check_name(EMIT_COMMAND, event_name_str(event))
        return await self._deliver(name, payload, target or EventTarget.global_(), EventTarget.global_(), repeat=repeat)

    @staticmethod
    def matches(subscription_target: EventTarget, emit_target: EventTarget) -> bool:
        return subscription_target.is_global or subscription_target == emit_target

    async def _deliver(
        self,
        event: str,
        payload: Any,
        target: EventTarget,
        source: EventTarget,
        *,
        repeat: int = 1,
    ) -> int:
        try:
            encoded = json.dumps(payload)
        except (TypeError, ValueError) as exc:
            raise IpcError(f"payload is not serializable: {exc}", command=EMIT_COMMAND) from exc

        matching = [
            sub for sub in self._subscriptions.values()
            if sub.event == event and self.matches(sub.target, target)
        ]
        delivered = 0
        for attempt in range(repeat):
            for sub in matching:
                # duplicates (attempt > 0) are already in flight and ignore later unlistens
                if attempt == 0 and sub.id not in self._subscriptions:
                    continue
                wire = {
                    "event": event,
                    "source": source.to_wire(),
                    "id": sub.id,
                    "payload": json.loads(encoded),
                }
                try:
                    await sub.connection.callbacks.dispatch(sub.handler, wire)
                except Exception as exc:
                    _logger.warning("Handler for '%s' #%d failed: %s", event, sub.id, exc)
                    self.error_engine.log_error(exc, context="dispatch", event=event, subscription_id=sub.id)
                    continue
                delivered += 1
        return delivered


__all__ = ["HostConnection", "HostSubscription", "MockHost"]
