from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Request

from echo_service.config import Settings
from echo_service.models.schemas import HealthResponse, InfoResponse
from echo_service.services.dependencies import get_app_settings


router = APIRouter(prefix="/api", tags=["system"])

ENDPOINTS = {
    "api": "/api (GET, POST, PUT, DELETE)",
    "health": "/api/health",
    "info": "/api/info",
    "metrics": "/api/metrics",
    "prometheus": "/metrics",
}


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    return HealthResponse(
        status="UP",
        timestamp=datetime.now(),
        service=settings.app_name,
        version=settings.app_version,
    )


@router.get("/info", response_model=InfoResponse)
async def info(request: Request, settings: Settings = Depends(get_app_settings)) -> InfoResponse:
    return InfoResponse(
        application=settings.app_name,
        version=settings.app_version,
        description=settings.app_description,
        build_time=request.app.state.build_time,
        endpoints=ENDPOINTS,
    )
