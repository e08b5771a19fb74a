from __future__ import annotations

from datetime import datetime
from time import monotonic
from typing import Any

import structlog
from prometheus_client import CollectorRegistry, Counter, Gauge, Summary

from echo_service.models.schemas import HTTP_METHODS, MetricsSummary


log = structlog.get_logger("metrics")


def _pair_tags(tags: tuple[str, ...]) -> dict[str, str]:
    """Consume tags two at a time; a trailing key without a value is dropped."""

    return {tags[i]: tags[i + 1] for i in range(0, len(tags) - 1, 2)}


class MetricsRegistry:
    """Process-wide API counters backed by a prometheus-client registry.

    Each register is its own prometheus value with its own lock, so increments
    are atomic per field but a summary read is not atomic across fields.
    """

    def __init__(self, service: str, registry: CollectorRegistry | None = None) -> None:
        self.service = service
        self.registry = registry if registry is not None else CollectorRegistry()
        self._started = monotonic()
        self._labels = {"service": service}

        self._api_calls = Counter(
            "echo_api_calls",
            "Total number of API calls made to the service",
            ["service", "method"],
            registry=self.registry,
        )
        self._requests = Counter(
            "echo_api_requests",
            "Total number of requests processed",
            ["service"],
            registry=self.registry,
        )
        self._errors = Counter(
            "echo_api_errors",
            "Total number of API errors",
            ["service"],
            registry=self.registry,
        )
        self._response_time = Summary(
            "echo_api_response_time_seconds",
            "Response time for API calls",
            ["service"],
            registry=self.registry,
        )
        self._active_connections = Gauge(
            "echo_api_active_connections",
            "Number of active connections",
            ["service"],
            registry=self.registry,
        )
        uptime = Gauge(
            "echo_api_uptime_seconds",
            "Application uptime in seconds",
            ["service"],
            registry=self.registry,
        )
        uptime.labels(**self._labels).set_function(self.uptime_seconds)

        # Pre-create every method series so scrapes show zeroes before traffic.
        for method in HTTP_METHODS:
            self._api_calls.labels(service=service, method=method)
        self._requests.labels(**self._labels)
        self._errors.labels(**self._labels)
        self._active_connections.labels(**self._labels)

        log.info("metrics_registry_initialized", service=service)

    def increment_api_calls(self, method: str) -> None:
        self._api_calls.labels(service=self.service, method=method.upper()).inc()
        self._requests.labels(**self._labels).inc()
        log.debug("api_calls_incremented", method=method)

    def increment_errors(self) -> None:
        self._errors.labels(**self._labels).inc()
        log.debug("errors_incremented")

    def record_response_time(self, seconds: float) -> None:
        self._response_time.labels(**self._labels).observe(seconds)
        log.debug("response_time_recorded", elapsed_ms=round(seconds * 1000.0, 2))

    def increment_active_connections(self) -> None:
        self._active_connections.labels(**self._labels).inc()
        log.debug("active_connections_incremented")

    def decrement_active_connections(self) -> None:
        # Unpaired decrements are allowed and may drive the gauge negative.
        self._active_connections.labels(**self._labels).dec()
        log.debug("active_connections_decremented")

    def uptime_seconds(self) -> float:
        return monotonic() - self._started

    def _sample(self, name: str, **labels: str) -> float:
        value = self.registry.get_sample_value(name, {**self._labels, **labels})
        return value if value is not None else 0.0

    def calls_by_method(self) -> dict[str, float]:
        return {method: self._sample("echo_api_calls_total", method=method) for method in HTTP_METHODS}

    def get_metrics_summary(self) -> MetricsSummary:
        by_method = self.calls_by_method()
        return MetricsSummary(
            total_api_calls=sum(by_method.values()),
            total_errors=self._sample("echo_api_errors_total"),
            active_connections=int(self._sample("echo_api_active_connections")),
            total_requests=int(self._sample("echo_api_requests_total")),
            calls_by_method=by_method,
            uptime_seconds=round(self.uptime_seconds(), 3),
            timestamp=datetime.now(),
        )

    def create_custom_counter(self, name: str, description: str, *tags: str) -> Any:
        """Register a counter in this registry and return the series for ``tags``.

        Registering a name twice raises ``ValueError`` from prometheus-client.
        """

        labels = _pair_tags(tags)
        counter = Counter(name, description, list(labels), registry=self.registry)
        return counter.labels(**labels) if labels else counter

    def create_custom_timer(self, name: str, description: str, *tags: str) -> Any:
        labels = _pair_tags(tags)
        timer = Summary(name, description, list(labels), registry=self.registry)
        return timer.labels(**labels) if labels else timer
