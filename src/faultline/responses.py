"""Response primitives."""

from __future__ import annotations

from typing import Iterable

import msgspec

from .http import Status, reason_phrase

DEFAULT_SECURITY_HEADERS: tuple[tuple[str, str], ...] = (
    ("content-security-policy", "default-src 'none'; style-src 'unsafe-inline'; img-src data:"),
    ("x-content-type-options", "nosniff"),
    ("referrer-policy", "no-referrer"),
    ("x-frame-options", "DENY"),
    ("cache-control", "no-store"),
)

Headers = tuple[tuple[str, str], ...]


class Response(msgspec.Struct, frozen=True):
    """Immutable response payload."""

    status: int = int(Status.OK)
    headers: Headers = ()
    body: bytes = b""
    reason: str | None = None

    def with_headers(self, headers: Iterable[tuple[str, str]]) -> "Response":
        """Return a new response with ``headers`` appended."""

        return Response(
            status=self.status,
            headers=self.headers + tuple(headers),
            body=self.body,
            reason=self.reason,
        )

    def header(self, name: str, default: str | None = None) -> str | None:
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return default


def apply_default_security_headers(
    response: Response,
    *,
    headers: Iterable[tuple[str, str]] | None = None,
) -> Response:
    """Append default security headers to ``response`` when missing."""

    baseline = tuple(headers or DEFAULT_SECURITY_HEADERS)
    if not baseline:
        return response
    existing = {name.lower(): value for name, value in response.headers}
    additions = tuple((name, value) for name, value in baseline if name.lower() not in existing)
    if not additions:
        return response
    return response.with_headers(additions)


class ResponseWriter:
    """Mutable response sink handed to the error pipeline.

    Mirrors the write-once semantics of a server response: headers can be
    set until :meth:`end` is called, after which the writer is sealed.
    """

    __slots__ = ("_body", "_ended", "_headers", "status_code", "status_message")

    def __init__(
        self,
        *,
        status_code: int = int(Status.OK),
        headers: Iterable[tuple[str, str]] | None = None,
    ) -> None:
        self.status_code = status_code
        self.status_message: str | None = None
        self._headers: dict[str, str] = {name.lower(): value for name, value in (headers or ())}
        self._body = b""
        self._ended = False

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def body(self) -> bytes:
        return self._body

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    def header(self, name: str, default: str | None = None) -> str | None:
        return self._headers.get(name.lower(), default)

    def put_header(self, name: str, value: str) -> "ResponseWriter":
        self._ensure_open()
        self._headers[name.lower()] = value
        return self

    def end(self, body: str | bytes = b"") -> None:
        """Write ``body`` and seal the response."""

        self._ensure_open()
        self._body = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        self._ended = True

    def to_response(self) -> Response:
        """Freeze the written state into a :class:`Response`."""

        reason = self.status_message or reason_phrase(self.status_code)
        response = Response(
            status=self.status_code,
            headers=tuple(self._headers.items()),
            body=self._body,
            reason=reason,
        )
        return apply_default_security_headers(response)

    def _ensure_open(self) -> None:
        if self._ended:
            raise RuntimeError("Response has already been written")


__all__ = [
    "DEFAULT_SECURITY_HEADERS",
    "Response",
    "ResponseWriter",
    "apply_default_security_headers",
]
