"""Request primitives."""

from __future__ import annotations

from typing import Mapping

from .negotiation import MIMEHeader, parse_accept


class Request:
    """Immutable view of the request that failed."""

    __slots__ = ("_accept", "headers", "method", "path")

    def __init__(
        self,
        *,
        method: str,
        path: str,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.method = method.upper()
        self.path = path
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self._accept: tuple[MIMEHeader, ...] | None = None

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)

    def accept(self) -> tuple[MIMEHeader, ...]:
        """Return the parsed ``Accept`` entries in the order the client sent them."""

        if self._accept is None:
            self._accept = parse_accept(self.header("accept"))
        return self._accept

    def __repr__(self) -> str:
        return f"Request(method={self.method!r}, path={self.path!r})"


__all__ = ["Request"]
