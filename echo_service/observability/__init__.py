"""Observability helpers for the echo service.

Structured JSON logging via structlog with per-request context, plus a metrics
registry backed by prometheus-client that the echo routes update on every call.
"""
