from __future__ import annotations

from datetime import datetime

import structlog
from fastapi import FastAPI

from echo_service.api.echo import router as echo_router
from echo_service.api.metrics import router as metrics_router
from echo_service.api.system import router as system_router
from echo_service.config import Settings, get_settings
from echo_service.observability.logging import configure_logging
from echo_service.observability.metrics import MetricsRegistry
from echo_service.observability.middleware import RequestContextMiddleware


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.logging_level)

    metrics = MetricsRegistry(service=settings.service_tag)

    app = FastAPI(title=settings.app_name, version=settings.app_version, description=settings.app_description)
    app.state.settings = settings
    app.state.metrics = metrics
    app.state.build_time = datetime.now()

    app.add_middleware(RequestContextMiddleware, metrics=metrics)
    app.include_router(echo_router)
    app.include_router(system_router)
    app.include_router(metrics_router)

    structlog.get_logger("app").info("app_created", service=settings.service_tag, version=settings.app_version)
    return app


app = create_app()
