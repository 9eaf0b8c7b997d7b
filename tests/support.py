"""Test support utilities for the error rendering tests."""

from __future__ import annotations

from typing import Any, TypeVar

import msgspec

from faultline.requests import Request
from faultline.responses import ResponseWriter

E = TypeVar("E", bound=BaseException)

SECRET = "secret-token-42"


def explode_deeply(exc: BaseException) -> None:
    _explode(exc)


def _explode(exc: BaseException) -> None:
    raise exc


def raised(exc: E) -> E:
    """Return ``exc`` after raising it through two named frames."""

    try:
        explode_deeply(exc)
    except BaseException as caught:
        return caught  # type: ignore[return-value]
    raise AssertionError("unreachable")  # pragma: no cover


def build_request(accept: str | None = None, **kwargs) -> Request:
    headers = dict(kwargs.pop("headers", {}) or {})
    if accept is not None:
        headers["accept"] = accept
    return Request(method=kwargs.pop("method", "GET"), path=kwargs.pop("path", "/diagram"), headers=headers, **kwargs)


def json_decode(data: bytes) -> Any:
    return msgspec.json.decode(data)


def writer(content_type: str | None = None) -> ResponseWriter:
    headers = [("content-type", content_type)] if content_type else None
    return ResponseWriter(headers=headers)


__all__ = ["SECRET", "build_request", "explode_deeply", "json_decode", "raised", "writer"]
