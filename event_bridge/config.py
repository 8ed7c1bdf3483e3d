"""Environment-backed configuration helpers for event_bridge."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

from dotenv import load_dotenv

from event_bridge.core.errors import InvalidTargetError
from event_bridge.core.targets import EventTarget, TargetKind

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_ENV_PATHS: Sequence[Path] = (
    PROJECT_ROOT / ".env",
    PROJECT_ROOT / "config" / ".env",
)


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(slots=True)
class EventBridgeConfig:
    log_level: str = "INFO"
    # The surface this process renders; used as the emission source by test hosts.
    surface_kind: str = "webview"
    surface_label: str = "main"
    max_errors: int = 200

    @classmethod
    def from_env(cls) -> "EventBridgeConfig":
        max_errors = _int_env("EVENT_BRIDGE_MAX_ERRORS", 200)
        if max_errors <= 0:
            max_errors = 200
        return cls(
            log_level=os.getenv("EVENT_BRIDGE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
            surface_kind=os.getenv("EVENT_BRIDGE_SURFACE_KIND", "webview").strip().lower() or "webview",
            surface_label=os.getenv("EVENT_BRIDGE_SURFACE_LABEL", "main").strip() or "main",
            max_errors=max_errors,
        )

    def logging_level(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO

    def surface_target(self) -> EventTarget:
        kind = self.surface_kind.lower()
        if kind == TargetKind.WINDOW.value.lower():
            return EventTarget.window(self.surface_label)
        if kind == TargetKind.WEBVIEW.value.lower():
            return EventTarget.webview(self.surface_label)
        if kind == TargetKind.GLOBAL.value.lower():
            return EventTarget.global_()
        raise InvalidTargetError(f"Unknown surface kind: {self.surface_kind!r}")


def load_dotenv_files(paths: Optional[Iterable[str | Path]] = None) -> Sequence[Path]:
    """
    Load .env files into os.environ without overriding variables already set.
    Returns the files that existed and were processed.
    """
    processed: list[Path] = []
    for raw in paths or DEFAULT_ENV_PATHS:
        path = Path(raw).expanduser()
        if not path.is_absolute():
            path = (PROJECT_ROOT / path).resolve()
        if not path.exists():
            continue
        load_dotenv(dotenv_path=str(path), override=False)
        processed.append(path)
    return tuple(processed)


def load_config(dotenv_paths: Optional[Iterable[str | Path]] = None) -> EventBridgeConfig:
    load_dotenv_files(dotenv_paths)
    return EventBridgeConfig.from_env()


__all__ = ["EventBridgeConfig", "load_config", "load_dotenv_files"]
