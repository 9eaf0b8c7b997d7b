from __future__ import annotations

from faultline.requests import Request


def test_request_normalizes_method_and_headers() -> None:
    request = Request(method="post", path="/render", headers={"Accept": "text/html", "X-Trace": "1"})
    assert request.method == "POST"
    assert request.header("accept") == "text/html"
    assert request.header("X-TRACE") == "1"
    assert request.header("missing", "default") == "default"


def test_request_accept_preserves_client_order() -> None:
    request = Request(method="GET", path="/", headers={"accept": "image/png;q=0.1, text/html, */*;q=0.8"})
    values = [mime.value for mime in request.accept()]
    assert values == ["image/png;q=0.1", "text/html", "*/*;q=0.8"]
    assert request.accept() is request.accept()


def test_request_without_accept_header() -> None:
    request = Request(method="GET", path="/")
    assert request.accept() == ()
    assert repr(request) == "Request(method='GET', path='/')"
