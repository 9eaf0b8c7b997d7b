"""Framework exception types."""

from __future__ import annotations

from typing import Any

from .http import Status, ensure_status


class FaultlineError(Exception):
    """Base error type."""


class HTTPError(FaultlineError):
    """Status failure raised by request handlers.

    The error pipeline treats it as the framework failing a request with a
    bare status code: there is no underlying cause to disclose.
    """

    def __init__(self, status: int | Status, detail: Any = None) -> None:
        status_code = ensure_status(status)
        super().__init__(status_code, detail)
        self.status = status_code


class _ClientFacingError(FaultlineError):
    """Failure whose message is written for the client.

    ``message_html`` is an optional richer rendition used by the HTML page.
    """

    def __init__(self, message: str, message_html: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.message_html = message_html


class BadRequestError(_ClientFacingError):
    """The request could not be processed because of client input."""


class ServiceUnavailableError(_ClientFacingError):
    """A backing service needed to answer the request is unavailable."""


class IllegalStateError(FaultlineError):
    """The server reached a state it should never be in."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(*(() if message is None else (message,)))
        self.message = message


class ImageGenerationError(FaultlineError):
    """The image engine could not build or encode an error image."""


__all__ = [
    "BadRequestError",
    "FaultlineError",
    "HTTPError",
    "IllegalStateError",
    "ImageGenerationError",
    "ServiceUnavailableError",
]
