"""
Subscription management against the host.

Registration and cancellation are two independent round trips. The host is the
authority on whether a subscription exists; the client only keeps the id it was
handed, as a capability to ask for cancellation later. Nothing is cached here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional

from event_bridge.core.error_engine import ErrorEngine
from event_bridge.core.errors import InvalidEventNameError
from event_bridge.core.event_topics import (
    LISTEN_COMMAND,
    UNLISTEN_COMMAND,
    EventName,
    ListenArgs,
    UnlistenArgs,
    event_name_str,
)
from event_bridge.core.logging_utils import get_logger
from event_bridge.core.targets import EventTarget

_logger = get_logger("subscriptions")

Invoke = Callable[[str, Mapping[str, Any]], Awaitable[Any]]
RegisterCallback = Callable[[Callable[[Any], Any]], int]
UnlistenFn = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class Subscription:
    event_name: str
    subscription_id: int
    target: EventTarget
    handler: int  # marshaled callback handle


class SubscriptionManager:
    def __init__(
        self,
        invoke: Invoke,
        register_callback: RegisterCallback,
        *,
        error_engine: Optional[ErrorEngine] = None,
    ) -> None:
        self._invoke = invoke
        self._register_callback = register_callback
        self.error_engine = error_engine or ErrorEngine()

    async def register(
        self,
        event_name: EventName,
        target: EventTarget,
        handler: Callable[[Any], Any],
    ) -> Subscription:
        """
        Marshal ``handler`` and register it host-side.

        Only emptiness of the name is checked here; any other rejection comes
        back from the host and propagates unchanged. The marshaled handle is
        never released by this layer, so the handler stays reachable for as
        long as the host may still call it.
        """
        name = event_name_str(event_name)
        if not name:
            raise InvalidEventNameError("event name must not be empty")

        handle = self._register_callback(handler)
        args: ListenArgs = {"event": name, "target": target.to_wire(), "handler": handle}
        subscription_id = await self._invoke(LISTEN_COMMAND, args)
        subscription = Subscription(
            event_name=name,
            subscription_id=int(subscription_id),
            target=target,
            handler=handle,
        )
        _logger.debug(
            "Registered subscription %d for '%s' (target=%s, handler=%d)",
            subscription.subscription_id, name, target, handle,
        )
        return subscription

    async def cancel(
        self,
        event_name: EventName,
        subscription_id: int,
        *,
        suppress_errors: bool = False,
    ) -> None:
        """
        Ask the host to drop a subscription.

        With ``suppress_errors`` a failure is logged and recorded instead of
        raised; one-shot cleanup uses this since nobody can act on the error.
        """
        name = event_name_str(event_name)
        args: UnlistenArgs = {"event": name, "eventId": subscription_id}
        try:
            await self._invoke(UNLISTEN_COMMAND, args)
        except Exception as exc:
            if not suppress_errors:
                raise
            _logger.debug("Ignoring failed unlisten of '%s' #%d: %s", name, subscription_id, exc)
            self.error_engine.log_error(
                exc, context="unlisten", event=name, subscription_id=subscription_id
            )
            return
        _logger.debug("Cancelled subscription %d for '%s'", subscription_id, name)

    def unlisten_handle(self, subscription: Subscription) -> UnlistenFn:
        """Zero-argument cancellation handle; safe to call any number of times."""
        event_name = subscription.event_name
        subscription_id = subscription.subscription_id

        async def unlisten() -> None:
            await self.cancel(event_name, subscription_id)

        return unlisten


__all__ = [
    "Invoke",
    "RegisterCallback",
    "Subscription",
    "SubscriptionManager",
    "UnlistenFn",
]
