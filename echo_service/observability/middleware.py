from __future__ import annotations

import uuid
from time import perf_counter
from typing import Any, Callable

import structlog
from starlette.datastructures import MutableHeaders

from echo_service.observability.metrics import MetricsRegistry


class RequestContextMiddleware:
    """Binds request context for logs, tracks connections, timing and errors."""

    def __init__(self, app: Callable[..., Any], metrics: MetricsRegistry) -> None:
        self.app = app
        self.metrics = metrics
        # Scrapes and summaries do not count as API traffic.
        self._excluded_metric_paths = {"/api/metrics", "/metrics"}

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())
        path = scope.get("path")
        method = scope.get("method")
        observed = path not in self._excluded_metric_paths

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=path,
            method=method,
        )

        start = perf_counter()
        status_code: int = 500

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code

            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))
                headers = MutableHeaders(scope=message)
                headers["X-Request-ID"] = request_id

            await send(message)

        if observed:
            self.metrics.increment_active_connections()
        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed = perf_counter() - start

            if observed:
                self.metrics.decrement_active_connections()
                self.metrics.record_response_time(elapsed)
                if status_code >= 500:
                    self.metrics.increment_errors()

            structlog.get_logger("access").info(
                "http_request",
                status_code=status_code,
                elapsed_ms=round(elapsed * 1000.0, 2),
            )

            structlog.contextvars.clear_contextvars()
