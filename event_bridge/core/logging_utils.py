"""
Logging for event_bridge.

Every record written through the package handlers carries a ``surface`` field
naming the window or webview this process renders, so logs from several
surfaces sharing one host can be told apart.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s [%(surface)s] - %(levelname)s - %(message)s"
ROOT_LOGGER_NAME = "event_bridge"


class SurfaceFilter(logging.Filter):
    """Stamp the configured surface label onto each record as ``surface``."""

    def __init__(self, surface: str = "-") -> None:
        super().__init__()
        self.surface = surface

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "surface"):
            record.surface = self.surface
        return True


class SurfaceFormatter(logging.Formatter):
    """Formatter that tolerates records which never passed a SurfaceFilter."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "surface"):
            record.surface = "-"
        return super().format(record)


def configure_library_logging(
    *,
    level: int = logging.INFO,
    surface: str = "-",
    fmt: str = DEFAULT_FORMAT,
    handlers: Optional[Iterable[logging.Handler]] = None,
) -> logging.Logger:
    """Replace the package logger's handlers with ones tagged for ``surface``."""

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)

    surface_filter = SurfaceFilter(surface)
    for handler in list(handlers or ()) or [logging.StreamHandler()]:
        handler.setFormatter(SurfaceFormatter(fmt))
        handler.addFilter(surface_filter)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Namespaced child of the package logger."""

    return logging.getLogger(ROOT_LOGGER_NAME).getChild(name)


__all__ = [
    "DEFAULT_FORMAT",
    "ROOT_LOGGER_NAME",
    "SurfaceFilter",
    "SurfaceFormatter",
    "configure_library_logging",
    "get_logger",
]
