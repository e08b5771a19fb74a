from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from echo_service.config import Settings
from echo_service.models.schemas import MetricsSummary
from echo_service.observability.metrics import MetricsRegistry
from echo_service.services.dependencies import get_app_settings, get_metrics_registry


router = APIRouter(tags=["metrics"])


def _require_enabled(settings: Settings = Depends(get_app_settings)) -> None:
    if not settings.enable_metrics_endpoint:
        raise HTTPException(status_code=404, detail="Not found")


@router.get("/api/metrics", response_model=MetricsSummary, dependencies=[Depends(_require_enabled)])
async def metrics_summary(metrics: MetricsRegistry = Depends(get_metrics_registry)) -> MetricsSummary:
    return metrics.get_metrics_summary()


@router.get("/metrics", include_in_schema=False, dependencies=[Depends(_require_enabled)])
def prometheus_metrics(metrics: MetricsRegistry = Depends(get_metrics_registry)) -> Response:
    """Expose the registry in the Prometheus text format."""

    return Response(generate_latest(metrics.registry), media_type=CONTENT_TYPE_LATEST)
