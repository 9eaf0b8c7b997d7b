from __future__ import annotations

import pytest

from faultline.responses import (
    DEFAULT_SECURITY_HEADERS,
    Response,
    ResponseWriter,
    apply_default_security_headers,
)


def test_response_with_headers() -> None:
    base = Response(status=204, reason="No Content")
    updated = base.with_headers((("x-test", "1"),))
    assert updated.headers[-1] == ("x-test", "1")
    assert updated.reason == "No Content"
    assert updated.header("X-Test") == "1"
    assert updated.header("missing") is None


def test_apply_default_security_headers_preserves_existing() -> None:
    response = Response(status=500, headers=(("x-frame-options", "SAMEORIGIN"),))
    hardened = apply_default_security_headers(response)
    assert hardened.headers.count(("x-frame-options", "SAMEORIGIN")) == 1
    header_names = {name for name, _ in hardened.headers}
    assert "content-security-policy" in header_names


def test_apply_default_security_headers_with_empty_baseline() -> None:
    class EmptyHeaders:
        def __iter__(self):
            return iter(())

        def __bool__(self) -> bool:
            return True

    response = Response(status=204)
    assert apply_default_security_headers(response, headers=EmptyHeaders()) is response


def test_writer_collects_headers_and_body() -> None:
    writer = ResponseWriter(headers=[("Content-Type", "application/json")])
    assert writer.header("content-type") == "application/json"
    writer.status_code = 503
    writer.status_message = "Service Unavailable"
    writer.put_header("Retry-After", "30").end("down")
    assert writer.ended
    assert writer.body == b"down"
    assert writer.headers == {"content-type": "application/json", "retry-after": "30"}


def test_writer_is_sealed_after_end() -> None:
    writer = ResponseWriter()
    writer.end(b"\x89PNG")
    with pytest.raises(RuntimeError):
        writer.end("again")
    with pytest.raises(RuntimeError):
        writer.put_header("content-type", "text/plain")


def test_writer_to_response() -> None:
    writer = ResponseWriter(status_code=404)
    writer.put_header("content-type", "text/plain; charset=utf-8")
    writer.end("Error 404: Not Found")
    response = writer.to_response()
    assert response.status == 404
    assert response.reason == "Not Found"
    assert response.body == b"Error 404: Not Found"
    for header, value in DEFAULT_SECURITY_HEADERS:
        assert (header, value) in response.headers


def test_writer_reason_prefers_status_message() -> None:
    writer = ResponseWriter(status_code=500)
    writer.status_message = "Broken"
    assert writer.to_response().reason == "Broken"
