"""
Callback marshaling: local callables in, boundary-transmissible integer handles out.

The host only ever sees the integer. When it wants to deliver something it asks
the arena to ``dispatch`` by handle, and the arena calls the original function.
"""

from __future__ import annotations

import inspect
import itertools
from typing import Any, Callable, Dict, Iterator

from event_bridge.core.errors import IpcError
from event_bridge.core.logging_utils import get_logger

_logger = get_logger("callbacks")

Callback = Callable[[Any], Any]


class CallbackRegistry:
    """Indexed arena of callables keyed by a monotonically increasing counter."""

    def __init__(self, *, start: int = 1) -> None:
        self._callbacks: Dict[int, Callback] = {}
        self._counter: Iterator[int] = itertools.count(start)

    def register(self, fn: Callback) -> int:
        if not callable(fn):
            raise TypeError(f"callback must be callable, got {type(fn).__name__}")
        handle = next(self._counter)
        self._callbacks[handle] = fn
        _logger.debug("Registered callback %d -> %r", handle, fn)
        return handle

    # The registry instance can be handed over wherever a register_callback(fn) primitive is expected.
    __call__ = register

    def release(self, handle: int) -> bool:
        return self._callbacks.pop(handle, None) is not None

    def has(self, handle: int) -> bool:
        return handle in self._callbacks

    def __len__(self) -> int:
        return len(self._callbacks)

    async def dispatch(self, handle: int, data: Any) -> Any:
        """Invoke the callback behind ``handle``; awaitable results are awaited."""
        fn = self._callbacks.get(handle)
        if fn is None:
            raise IpcError(f"callback {handle} is not registered")
        result = fn(data)
        if inspect.isawaitable(result):
            result = await result
        return result


__all__ = ["Callback", "CallbackRegistry"]
