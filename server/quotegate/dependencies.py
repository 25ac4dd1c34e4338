# ─────────────────────────────────────────────────────────────────────────────
# Dependency Injection — FastAPI Depends() providers
# ─────────────────────────────────────────────────────────────────────────────
# State flows: lifespan creates → app.state stores → Depends() injects.
# No global variables. Every dependency is explicit in endpoint signatures.
# ─────────────────────────────────────────────────────────────────────────────


from fastapi import Request

from quotegate.config import Settings
from quotegate.providers.base import QuoteProvider
from quotegate.services.pipeline import RequestOrchestrator

UNKNOWN_CLIENT = "unknown"


def get_orchestrator(request: Request) -> RequestOrchestrator:
    """Inject RequestOrchestrator into endpoints via Depends()."""
    return request.app.state.orchestrator


def get_provider(request: Request) -> QuoteProvider:
    """Inject the quote provider into endpoints via Depends()."""
    return request.app.state.provider


def get_settings_dep(request: Request) -> Settings:
    """Inject Settings into endpoints via Depends()."""
    return request.app.state.settings


def get_client_identifier(request: Request) -> str:
    """Admission-control key for the calling client.

    First hop of ``X-Forwarded-For``, else ``X-Real-IP``, else the shared
    ``"unknown"`` bucket. Clients with neither header all share one quota.
    """
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop

    real_ip = request.headers.get("x-real-ip", "").strip()
    if real_ip:
        return real_ip

    return UNKNOWN_CLIENT
