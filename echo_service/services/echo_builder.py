from __future__ import annotations

import json
import math
from datetime import datetime
from typing import Any

import structlog
from starlette.requests import Request

from echo_service.models.schemas import EchoBody, EchoResponse
from echo_service.observability.metrics import MetricsRegistry


log = structlog.get_logger("echo")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Out of range float: {text}")
    return value


def parse_body(body: str | None) -> EchoBody:
    """Decode ``body`` as JSON when possible, otherwise keep the text as-is."""

    if body is None or not body.strip():
        return EchoBody.absent()

    try:
        # Non-finite numbers are not JSON and could not be rendered back out.
        decoded = json.loads(body, parse_constant=_reject_constant, parse_float=_finite_float)
    except (ValueError, RecursionError):
        return EchoBody.raw(body)
    return EchoBody.structured(decoded)


def decode_body(raw: bytes) -> str | None:
    if not raw:
        return None
    return raw.decode("utf-8", errors="replace")


def extract_headers(request: Request) -> dict[str, str]:
    # Repeated header names collapse to the last value seen.
    return {name: value for name, value in request.headers.items()}


def build_echo_response(request: Request, method: str, body: str | None) -> EchoResponse:
    """Summarise ``request`` as an EchoResponse. Never raises."""

    try:
        headers = extract_headers(request)
        return EchoResponse(
            method=method,
            headers=headers,
            body=parse_body(body),
            timestamp=datetime.now(),
            request_uri=request.url.path,
            query_string=request.url.query or None,
            remote_addr=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
            content_type=request.headers.get("content-type"),
        )
    except Exception as exc:  # noqa: BLE001
        log.exception("echo_response_failed", method=method)
        return EchoResponse(
            method=method,
            headers={},
            body=EchoBody.error_placeholder(),
            timestamp=datetime.now(),
            error=f"Failed to parse request: {exc}",
        )


def echo_request(
    request: Request,
    method: str,
    metrics: MetricsRegistry,
    body: str | None = None,
) -> EchoResponse:
    metrics.increment_api_calls(method)
    return build_echo_response(request, method, body)
