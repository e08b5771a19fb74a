from datetime import datetime

import pytest
from starlette.requests import Request

from echo_service.models.schemas import BodyKind, EchoBody, EchoResponse
from echo_service.observability.metrics import MetricsRegistry
from echo_service.services.echo_builder import (
    build_echo_response,
    decode_body,
    echo_request,
    parse_body,
)


def _request(path: str = "/api", query: bytes = b"", headers: list[tuple[bytes, bytes]] | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": query,
        "headers": headers or [],
        "client": ("10.0.0.7", 54321),
        "server": ("testserver", 80),
        "scheme": "http",
    }
    return Request(scope)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ('{"message": "Hello World"}', {"message": "Hello World"}),
        ("[1, 2, 3]", [1, 2, 3]),
        ('"just a string"', "just a string"),
        ("42", 42),
        ("true", True),
    ],
)
def test_parse_body_decodes_json_values(raw: str, expected) -> None:
    body = parse_body(raw)
    assert body.kind is BodyKind.JSON
    assert body.value == expected


def test_parse_body_keeps_invalid_json_verbatim() -> None:
    body = parse_body("invalid json content")
    assert body == EchoBody.raw("invalid json content")


@pytest.mark.parametrize("raw", [None, "", "   ", "\n\t"])
def test_parse_body_blank_is_absent(raw) -> None:
    body = parse_body(raw)
    assert body.kind is BodyKind.ABSENT
    assert not body.is_present


def test_parse_body_rejects_non_standard_constants() -> None:
    assert parse_body("Infinity").kind is BodyKind.RAW
    assert parse_body('{"x": NaN}') == EchoBody.raw('{"x": NaN}')


@pytest.mark.parametrize("raw", ["1e400", '{"x": 1e999}', '{"y": [0.5, -1e309]}'])
def test_parse_body_rejects_out_of_range_floats(raw: str) -> None:
    assert parse_body(raw) == EchoBody.raw(raw)


def test_parse_body_keeps_finite_floats() -> None:
    assert parse_body('{"x": 1.5e3, "y": -0.25}') == EchoBody.structured({"x": 1500.0, "y": -0.25})


def test_parse_body_falls_back_on_deep_nesting() -> None:
    raw = "[" * 5000 + "]" * 5000
    assert parse_body(raw) == EchoBody.raw(raw)


def test_json_null_body_is_omitted_from_payload() -> None:
    body = parse_body("null")
    assert body.kind is BodyKind.JSON
    assert not body.is_present


def test_decode_body_replaces_invalid_utf8() -> None:
    assert decode_body(b"") is None
    assert decode_body(b"caf\xc3\xa9") == "café"
    assert decode_body(b"\xff\xfe") == "\ufffd\ufffd"


def test_build_echo_response_collects_request_metadata() -> None:
    request = _request(
        query=b"a=1",
        headers=[
            (b"user-agent", b"unit-agent"),
            (b"content-type", b"text/plain"),
            (b"x-dup", b"one"),
            (b"x-dup", b"two"),
        ],
    )
    response = build_echo_response(request, "POST", "plain text")

    assert response.method == "POST"
    assert response.headers == {"user-agent": "unit-agent", "content-type": "text/plain", "x-dup": "two"}
    assert response.body == EchoBody.raw("plain text")
    assert response.request_uri == "/api"
    assert response.query_string == "a=1"
    assert response.remote_addr == "10.0.0.7"
    assert response.user_agent == "unit-agent"
    assert response.content_type == "text/plain"
    assert response.error is None


def test_build_echo_response_converts_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    from echo_service.services import echo_builder

    def _broken(_request):
        raise KeyError("headers")

    monkeypatch.setattr(echo_builder, "extract_headers", _broken)
    response = build_echo_response(_request(), "PUT", '{"a": 1}')

    assert response.body.kind is BodyKind.ERROR
    assert response.error == "Failed to parse request: 'headers'"
    assert response.to_payload() == {
        "method": "PUT",
        "headers": {},
        "body": "Error parsing request",
        "timestamp": response.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
        "error": "Failed to parse request: 'headers'",
    }


def test_to_payload_omits_unset_fields() -> None:
    response = EchoResponse(method="GET", timestamp=datetime(2024, 1, 2, 3, 4, 5), request_uri="/api")
    assert response.to_payload() == {
        "method": "GET",
        "headers": {},
        "timestamp": "2024-01-02 03:04:05",
        "requestUri": "/api",
    }


def test_echo_response_is_immutable() -> None:
    response = EchoResponse(method="GET", timestamp=datetime.now())
    with pytest.raises(ValueError):
        response.method = "POST"


def test_echo_request_counts_every_call() -> None:
    metrics = MetricsRegistry(service="unit")
    echo_request(_request(), "GET", metrics)
    echo_request(_request(), "POST", metrics, body="{}")

    summary = metrics.get_metrics_summary()
    assert summary.calls_by_method["GET"] == 1
    assert summary.calls_by_method["POST"] == 1
    assert summary.total_requests == 2
