"""Map a raw failure and the ambient status code onto an :class:`ErrorInfo`.

Failures are dispatched over a closed set of kinds. Every ``(failure, code)``
pair classifies, so nothing raised here can abort an error response.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .exceptions import BadRequestError, IllegalStateError, ServiceUnavailableError
from .http import Status, is_error_status, reason_phrase

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR = reason_phrase(Status.INTERNAL_SERVER_ERROR)


@dataclass(slots=True, frozen=True)
class ErrorInfo:
    """Normalized failure descriptor handed to the renderers."""

    cause: BaseException | None
    code: int
    message: str
    html_message: str | None = None

    @property
    def markup(self) -> str:
        """The text destined for the HTML page, before sanitization."""

        return self.html_message if self.html_message is not None else self.message


@dataclass(slots=True, frozen=True)
class Classification:
    status_message: str
    info: ErrorInfo


class FailureKind(str, Enum):
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    SERVICE_UNAVAILABLE = "service_unavailable"
    ILLEGAL_STATE = "illegal_state"
    GENERIC = "generic"


def failure_kind(failure: BaseException | None, status_code: int) -> FailureKind:
    if failure is None and status_code == Status.NOT_FOUND:
        return FailureKind.NOT_FOUND
    if isinstance(failure, BadRequestError):
        return FailureKind.BAD_REQUEST
    if isinstance(failure, ServiceUnavailableError):
        return FailureKind.SERVICE_UNAVAILABLE
    if isinstance(failure, IllegalStateError):
        return FailureKind.ILLEGAL_STATE
    return FailureKind.GENERIC


def failure_message(failure: BaseException | None) -> str | None:
    """Return the human message carried by ``failure``, if any."""

    if failure is None:
        return None
    try:
        message = getattr(failure, "message", None)
        if isinstance(message, str) and message:
            return message
        text = str(failure)
    except Exception:
        logger.warning("Unable to read the message of %s", type(failure).__name__, exc_info=True)
        return None
    return text or None


def _not_found(failure: BaseException | None, status_code: int, details: bool) -> Classification:
    phrase = reason_phrase(Status.NOT_FOUND)
    return Classification(phrase, ErrorInfo(failure, int(Status.NOT_FOUND), phrase))


def _client_facing(status: Status) -> Callable[[BaseException | None, int, bool], Classification]:
    def classify_client_facing(failure: BaseException | None, status_code: int, details: bool) -> Classification:
        message = failure_message(failure) or reason_phrase(status)
        html_message = getattr(failure, "message_html", None)
        return Classification(reason_phrase(status), ErrorInfo(failure, int(status), message, html_message))

    return classify_client_facing


def _illegal_state(failure: BaseException | None, status_code: int, details: bool) -> Classification:
    message = failure_message(failure) or INTERNAL_SERVER_ERROR
    return Classification(INTERNAL_SERVER_ERROR, ErrorInfo(failure, int(Status.INTERNAL_SERVER_ERROR), message))


def _generic(failure: BaseException | None, status_code: int, details: bool) -> Classification:
    code = status_code
    if not is_error_status(code):
        logger.warning(
            "Unexpected error code %s, error codes must be within 400 and 599, falling back to 500",
            status_code,
        )
        code = int(Status.INTERNAL_SERVER_ERROR)
    if details:
        message = failure_message(failure) or INTERNAL_SERVER_ERROR
    else:
        message = INTERNAL_SERVER_ERROR
    return Classification(INTERNAL_SERVER_ERROR, ErrorInfo(failure, code, message))


_CLASSIFIERS: dict[FailureKind, Callable[[BaseException | None, int, bool], Classification]] = {
    FailureKind.NOT_FOUND: _not_found,
    FailureKind.BAD_REQUEST: _client_facing(Status.BAD_REQUEST),
    FailureKind.SERVICE_UNAVAILABLE: _client_facing(Status.SERVICE_UNAVAILABLE),
    FailureKind.ILLEGAL_STATE: _illegal_state,
    FailureKind.GENERIC: _generic,
}


def classify(
    failure: BaseException | None,
    status_code: int,
    *,
    display_exception_details: bool = False,
) -> Classification:
    """Return the status message and :class:`ErrorInfo` for a failed request."""

    try:
        code = int(status_code)
    except (TypeError, ValueError):
        code = 0
    kind = failure_kind(failure, code)
    return _CLASSIFIERS[kind](failure, code, display_exception_details)


__all__ = [
    "Classification",
    "ErrorInfo",
    "FailureKind",
    "classify",
    "failure_kind",
    "failure_message",
]
