from __future__ import annotations

from fastapi import Request

from echo_service.config import Settings
from echo_service.observability.metrics import MetricsRegistry


def get_metrics_registry(request: Request) -> MetricsRegistry:
    return request.app.state.metrics


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
