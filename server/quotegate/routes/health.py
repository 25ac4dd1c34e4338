# ─────────────────────────────────────────────────────────────────────────────
# Health Check Routes — liveness and readiness
# ─────────────────────────────────────────────────────────────────────────────
#   /health        → Liveness probe. "Is the process alive?" Always 200.
#   /health/ready  → Readiness probe. "Can it serve traffic?" 503 when the
#                    provider credential is missing.
# ─────────────────────────────────────────────────────────────────────────────

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from quotegate.config import Settings
from quotegate.dependencies import get_provider, get_settings_dep
from quotegate.providers.base import QuoteProvider
from quotegate.schemas import LivenessResponse, ReadinessResponse

router = APIRouter()


@router.get("/health", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness probe. No deps, no I/O."""
    return LivenessResponse(status="ok")


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness(
    provider: QuoteProvider = Depends(get_provider),
    settings: Settings = Depends(get_settings_dep),
) -> JSONResponse:
    """Readiness probe. Does not call the provider; only checks configuration."""
    ready = provider.is_configured

    response = ReadinessResponse(
        status="ready" if ready else "not_ready",
        provider_configured=ready,
        model=settings.gemini_model,
    )

    return JSONResponse(
        status_code=200 if ready else 503,
        content=response.model_dump(),
    )
