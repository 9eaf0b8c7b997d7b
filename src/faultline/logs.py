"""Logging setup and the error event sink."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from .http import is_client_error

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from .classification import ErrorInfo
    from .requests import Request

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("faultline.errors")


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the ``faultline`` logger tree."""

    root = logging.getLogger("faultline")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(root.handlers):
        if getattr(handler, "_faultline", False):
            root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    setattr(handler, "_faultline", True)
    root.addHandler(handler)


def level_for(code: int) -> int:
    """Return the log level for an error response with status ``code``."""

    return logging.WARNING if is_client_error(code) else logging.ERROR


class ErrorEventLogger:
    """Record one event per rendered error response."""

    __slots__ = ("_logger",)

    def __init__(self, target: logging.Logger | None = None) -> None:
        self._logger = target or logger

    def log(self, level: int, request: "Request | None", info: "ErrorInfo") -> None:
        method = request.method if request is not None else "-"
        path = request.path if request is not None else "-"
        exc_info = None
        if level >= logging.ERROR and info.cause is not None:
            exc_info = (type(info.cause), info.cause, info.cause.__traceback__)
        self._logger.log(
            level,
            "%s %s -> %d %s",
            method,
            path,
            info.code,
            info.message,
            exc_info=exc_info,
            extra={
                "http_method": method,
                "http_path": path,
                "error_code": info.code,
                "error_message": info.message,
            },
        )


__all__ = ["LOG_FORMAT", "ErrorEventLogger", "configure_logging", "level_for"]
