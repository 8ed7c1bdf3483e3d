"""
Public event API: listen, once and emit.

Example::

    client = EventClient(invoke, callbacks.register)
    unlisten = await client.listen("ping", lambda event: print(event.payload))
    await client.emit("ping", {"n": 1})
    await unlisten()

Events always make the round trip through the host, including events emitted
and listened to from the same surface.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Set, Tuple, Union

from event_bridge.core.error_engine import ErrorEngine
from event_bridge.core.errors import ClientNotConfiguredError
from event_bridge.core.event_topics import EMIT_COMMAND, EmitArgs, EventName, event_name_str
from event_bridge.core.logging_utils import get_logger
from event_bridge.core.models import Event
from event_bridge.core.subscriptions import (
    Invoke,
    RegisterCallback,
    SubscriptionManager,
    UnlistenFn,
)
from event_bridge.core.targets import TargetDirective, resolve_target

_logger = get_logger("event_api")

EventCallback = Callable[[Event[Any]], Union[None, Awaitable[None]]]


async def _call_handler(handler: EventCallback, event: Event[Any]) -> None:
    result = handler(event)
    if inspect.isawaitable(result):
        await result


def _as_event(data: Any) -> Event[Any]:
    if isinstance(data, Event):
        return data
    return Event.from_wire(data)


class EventClient:
    """Listen to and emit events through one surface's connection to the host."""

    def __init__(
        self,
        invoke: Invoke,
        register_callback: RegisterCallback,
        *,
        error_engine: Optional[ErrorEngine] = None,
    ) -> None:
        self._invoke = invoke
        # one-shot cleanups still waiting on the host; held so they are not collected
        self._cleanup_tasks: Set["asyncio.Task[None]"] = set()
        self._subscriptions = SubscriptionManager(
            invoke, register_callback, error_engine=error_engine
        )

    @property
    def error_engine(self) -> ErrorEngine:
        return self._subscriptions.error_engine

    @property
    def pending_cleanups(self) -> Tuple["asyncio.Task[None]", ...]:
        return tuple(self._cleanup_tasks)

    async def flush_cleanup(self) -> None:
        """Wait until every scheduled one-shot cleanup has been answered by the host."""
        while self._cleanup_tasks:
            await asyncio.gather(*self._cleanup_tasks, return_exceptions=True)

    def _schedule_cleanup(self, event_name: str, subscription_id: int) -> None:
        task = asyncio.get_running_loop().create_task(
            self._subscriptions.cancel(event_name, subscription_id, suppress_errors=True)
        )
        self._cleanup_tasks.add(task)
        task.add_done_callback(self._cleanup_done)

    def _cleanup_done(self, task: "asyncio.Task[None]") -> None:
        self._cleanup_tasks.discard(task)
        if task.cancelled():
            _logger.debug("One-shot cleanup %r was cancelled", task)
            return
        exc = task.exception()
        if exc is not None:
            self.error_engine.log_error(exc, context="unlisten")

    async def listen(
        self,
        event: EventName,
        handler: EventCallback,
        options: TargetDirective = None,
    ) -> UnlistenFn:
        """
        Listen to an event, optionally scoped to a window or webview.

        Returns a coroutine function that unregisters the listener. It may be
        awaited any number of times, including from inside ``handler``; a host
        failure while unregistering is raised to whoever awaits it. Removing
        the listener when it is no longer needed is the caller's job.
        """
        target = resolve_target(options)

        async def deliver(data: Any) -> None:
            await _call_handler(handler, _as_event(data))

        subscription = await self._subscriptions.register(event, target, deliver)
        return self._subscriptions.unlisten_handle(subscription)

    async def once(
        self,
        event: EventName,
        handler: EventCallback,
        options: TargetDirective = None,
    ) -> UnlistenFn:
        """
        Listen to a single occurrence of an event.

        After the first delivery the listener schedules its own unregistration
        using the id carried on the delivered event, which is known even when
        the host delivers before ``listen`` has returned. Delivery does not wait
        for that round trip; its failure is recorded on ``error_engine`` and
        otherwise ignored. Deliveries that arrive before the host has processed
        the cleanup are dropped.
        """
        name = event_name_str(event)
        fired = False

        async def one_shot(delivered: Event[Any]) -> None:
            nonlocal fired
            if fired:
                _logger.debug("Dropping repeat delivery of '%s' to one-shot #%d", name, delivered.id)
                return
            fired = True
            try:
                await _call_handler(handler, delivered)
            finally:
                self._schedule_cleanup(name, delivered.id)

        return await self.listen(name, one_shot, options)

    async def emit(
        self,
        event: EventName,
        payload: Any = None,
        options: TargetDirective = None,
    ) -> None:
        """Emit an event to the host, which fans it out to matching listeners."""
        name = event_name_str(event)
        target = resolve_target(options)
        args: EmitArgs = {"event": name, "target": target.to_wire(), "payload": payload}
        await self._invoke(EMIT_COMMAND, args)
        _logger.debug("Emitted '%s' (target=%s)", name, target)


# --------------------------
# Module-level helpers
# --------------------------
_default_client: Optional[EventClient] = None


def set_default_client(client: Optional[EventClient]) -> None:
    """Install (or with ``None`` remove) the client used by the module-level helpers."""
    global _default_client
    _default_client = client


def reset_default_client(client: Optional[EventClient] = None) -> None:
    """Remove the default client; with ``client``, only when it is the installed one."""
    global _default_client
    if client is None or _default_client is client:
        _default_client = None


def get_default_client() -> EventClient:
    if _default_client is None:
        raise ClientNotConfiguredError("call set_default_client() before using listen/once/emit")
    return _default_client


async def listen(event: EventName, handler: EventCallback, options: TargetDirective = None) -> UnlistenFn:
    return await get_default_client().listen(event, handler, options)


async def once(event: EventName, handler: EventCallback, options: TargetDirective = None) -> UnlistenFn:
    return await get_default_client().once(event, handler, options)


async def emit(event: EventName, payload: Any = None, options: TargetDirective = None) -> None:
    await get_default_client().emit(event, payload, options)


__all__ = [
    "EventCallback",
    "EventClient",
    "emit",
    "get_default_client",
    "listen",
    "once",
    "reset_default_client",
    "set_default_client",
]
