from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from echo_service.config import Settings
from echo_service.models.schemas import EchoResponse
from echo_service.observability.metrics import MetricsRegistry
from echo_service.services.dependencies import get_app_settings, get_metrics_registry
from echo_service.services.echo_builder import decode_body, echo_request

router = APIRouter(prefix="/api", tags=["echo"])

log = structlog.get_logger("api")


def _render(response: EchoResponse, settings: Settings) -> JSONResponse:
    return JSONResponse(content=response.to_payload(settings.timestamp_format))


@router.get("")
async def handle_get(
    request: Request,
    metrics: MetricsRegistry = Depends(get_metrics_registry),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    log.info("api_request_received", verb="GET")
    return _render(echo_request(request, "GET", metrics), settings)


@router.post("")
async def handle_post(
    request: Request,
    metrics: MetricsRegistry = Depends(get_metrics_registry),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    log.info("api_request_received", verb="POST")
    body = decode_body(await request.body())
    return _render(echo_request(request, "POST", metrics, body=body), settings)


@router.put("")
async def handle_put(
    request: Request,
    metrics: MetricsRegistry = Depends(get_metrics_registry),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    log.info("api_request_received", verb="PUT")
    body = decode_body(await request.body())
    return _render(echo_request(request, "PUT", metrics, body=body), settings)


@router.delete("")
async def handle_delete(
    request: Request,
    metrics: MetricsRegistry = Depends(get_metrics_registry),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    log.info("api_request_received", verb="DELETE")
    return _render(echo_request(request, "DELETE", metrics), settings)
