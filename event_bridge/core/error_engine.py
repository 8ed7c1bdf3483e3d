from __future__ import annotations

import traceback
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional


class ErrorEngine:
    """
    Bounded record of failures that were deliberately not raised to a caller.

    One-shot cleanup errors and host-side handler errors end up here so they
    can still be inspected after the fact.
    """

    def __init__(self, *, max_errors: int = 200) -> None:
        self._errors: Deque[Dict[str, Any]] = deque(maxlen=max_errors)
        self._total = 0

    @property
    def max_errors(self) -> Optional[int]:
        return self._errors.maxlen

    @property
    def count(self) -> int:
        """Number of errors logged since creation (not capped by max_errors)."""
        return self._total

    def log_error(self, error: BaseException, *, context: str = "", **metadata: Any) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "context": context,
            "type": type(error).__name__,
            "message": str(error),
            "trace": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if metadata:
            data["metadata"] = dict(metadata)
        self._errors.appendleft(data)
        self._total += 1
        return data

    def peek_last(self) -> Optional[Dict[str, Any]]:
        return self._errors[0] if self._errors else None

    def recent(self, *, limit: int = 100) -> List[Dict[str, Any]]:
        return list(self._errors)[:limit]

    def dump_recent_text(self, *, limit: int = 100) -> str:
        out = []
        for e in self.recent(limit=limit):
            out.append(f"[{e.get('context','')}] {e.get('type','')}: {e.get('message','')}")
        return "\n".join(out)

    def clear(self) -> None:
        self._errors.clear()


__all__ = ["ErrorEngine"]
