# ─────────────────────────────────────────────────────────────────────────────
# FastAPI Application Factory + Lifespan
# ─────────────────────────────────────────────────────────────────────────────
# Entrypoint: uvicorn quotegate.main:create_app --factory --host 0.0.0.0 --port 8080
# The --factory flag tells uvicorn to call create_app() for the app instance.
# ─────────────────────────────────────────────────────────────────────────────

import os
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quotegate.config import get_settings
from quotegate.exceptions import register_exception_handlers
from quotegate.logging_config import configure_logging
from quotegate.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from quotegate.providers.gemini import GeminiProvider
from quotegate.routes import extend, health
from quotegate.services.admission import AdmissionController
from quotegate.services.pipeline import RequestOrchestrator

logger = structlog.get_logger(__name__)


def _configure_otel(exporter_type: str) -> None:
    """Configure OpenTelemetry tracing.

    Supports "console" for local development. No-op if the exporter type
    is unknown.
    """
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    provider = TracerProvider()

    if exporter_type == "console":
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter

        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    else:
        logger.warning("unknown_otel_exporter", exporter=exporter_type)
        return

    from opentelemetry import trace

    trace.set_tracer_provider(provider)
    logger.info("otel_configured", exporter=exporter_type)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage startup and shutdown lifecycle.

    All stateful objects are created here and stored in app.state for
    injection via Depends(). The admission controller lives exactly as
    long as the process: counters start empty and are never persisted.
    """
    settings = get_settings()

    otel_exporter = os.environ.get("OTEL_EXPORTER", "")
    if otel_exporter:
        _configure_otel(otel_exporter)

    admission = AdmissionController.from_settings(settings)

    # Shared client for connection pooling. The per-request deadline is
    # enforced by the provider; the client timeout is only a backstop.
    http_client = httpx.AsyncClient(timeout=httpx.Timeout(30.0))
    provider = GeminiProvider.from_settings(settings, http_client=http_client)

    orchestrator = RequestOrchestrator(admission, provider, settings)

    app.state.settings = settings
    app.state.admission = admission
    app.state.provider = provider
    app.state.orchestrator = orchestrator

    logger.info(
        "gateway_started",
        model=settings.gemini_model,
        rate_limit_requests=settings.rate_limit_requests,
        rate_limit_window_ms=settings.rate_limit_window_ms,
        provider_configured=provider.is_configured,
    )

    yield  # App is running, serving requests

    # Shutdown
    await http_client.aclose()


def _parse_origins(allowed_origins: str) -> list[str]:
    """Parse comma-separated origin string into a list.

    Returns ``["*"]`` if the input is empty (development mode).
    Strips whitespace from each origin.
    """
    if not allowed_origins.strip():
        return ["*"]
    return [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]


def create_app() -> FastAPI:
    """Application factory. Invoked by: uvicorn quotegate.main:create_app --factory

    The --factory flag tells uvicorn to call this function to get the app,
    rather than importing a module-level variable. This avoids side effects
    at import time and makes testing cleaner.
    """
    settings = get_settings()
    configure_logging(log_level=settings.log_level, json_output=settings.log_json)

    app = FastAPI(
        title="Quote Gateway",
        description="Extends quotes with a meaning-inverting continuation",
        version="0.1.0",
        lifespan=lifespan,
    )

    # ── Middleware stack ─────────────────────────────────────────────────────
    # Starlette applies middleware in reverse order of add_middleware calls.
    # Execution order for an incoming request: CORS → RequestContext → route

    app.add_middleware(RequestContextMiddleware)

    origins = _parse_origins(settings.allowed_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["Content-Type", REQUEST_ID_HEADER],
        expose_headers=["Retry-After", REQUEST_ID_HEADER],
    )

    # ── Exception handlers ───────────────────────────────────────────────────
    register_exception_handlers(app)

    # ── Routes ───────────────────────────────────────────────────────────────
    app.include_router(health.router, tags=["health"])
    app.include_router(extend.router, tags=["extend"])

    return app
