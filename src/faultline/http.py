"""HTTP status helpers used when classifying failures."""

from __future__ import annotations

from enum import IntEnum
from http import HTTPStatus as _HTTPStatus


class Status(IntEnum):
    """Enumeration of the HTTP status codes the error pipeline relies on."""

    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503


def ensure_status(status: int | Status) -> int:
    """Normalize ``status`` to an ``int`` and ensure it is within the HTTP range."""

    code = int(status)
    if code < 100 or code > 599:
        raise ValueError(f"Invalid HTTP status code: {status}")
    return code


def reason_phrase(status: int | Status) -> str:
    """Return the HTTP reason phrase for ``status`` if known."""

    try:
        code = ensure_status(status)
    except ValueError:
        return "Unknown Status"
    try:
        return _HTTPStatus(code).phrase
    except ValueError:  # pragma: no cover - non-standard status codes
        return "Unknown Status"


def is_error_status(status: int) -> bool:
    """Return ``True`` if ``status`` lies in the renderable 4xx/5xx window."""

    return 400 <= int(status) <= 599


def is_client_error(status: int | Status) -> bool:
    """Return ``True`` if ``status`` is a 4xx code."""

    code = ensure_status(status)
    return 400 <= code < 500


__all__ = [
    "Status",
    "ensure_status",
    "is_client_error",
    "is_error_status",
    "reason_phrase",
]
