"""Bootstrapper that turns configuration into a ready-to-use event client."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from event_bridge.config import EventBridgeConfig, load_config
from event_bridge.core.error_engine import ErrorEngine
from event_bridge.core.event_api import EventClient, reset_default_client, set_default_client
from event_bridge.core.logging_utils import configure_library_logging, get_logger
from event_bridge.core.subscriptions import Invoke, RegisterCallback

logger = get_logger("runtime")


class EventBridgeRuntime:
    """Lifecycle of one surface's client: logging, error record and default-client install."""

    def __init__(
        self,
        invoke: Invoke,
        register_callback: RegisterCallback,
        *,
        config: Optional[EventBridgeConfig] = None,
        handlers: Optional[Iterable[logging.Handler]] = None,
    ) -> None:
        self.config = config or load_config()
        self.surface = self.config.surface_target()
        self.logger = configure_library_logging(
            level=self.config.logging_level(),
            surface=str(self.surface),
            handlers=handlers,
        )
        self.error_engine = ErrorEngine(max_errors=self.config.max_errors)
        self.client = EventClient(invoke, register_callback, error_engine=self.error_engine)
        logger.info("Event bridge ready for %s", self.surface)

    @classmethod
    def attach(
        cls,
        host: Any,
        *,
        config: Optional[EventBridgeConfig] = None,
        handlers: Optional[Iterable[logging.Handler]] = None,
    ) -> "EventBridgeRuntime":
        """Connect to ``host`` as the configured surface (any object with ``connect(source)``)."""
        config = config or load_config()
        connection = host.connect(config.surface_target())
        return cls(connection.invoke, connection.callbacks.register, config=config, handlers=handlers)

    def install(self) -> EventClient:
        """Make this client the one behind the module-level listen/once/emit."""
        set_default_client(self.client)
        return self.client

    async def shutdown(self) -> None:
        await self.client.flush_cleanup()
        reset_default_client(self.client)
        if self.error_engine.count:
            logger.info("Shutting down with %d recorded error(s)", self.error_engine.count)


__all__ = ["EventBridgeRuntime"]
