# ─────────────────────────────────────────────────────────────────────────────
# Request Orchestrator — validate → admit → extend
# ─────────────────────────────────────────────────────────────────────────────
# Endpoints delegate here. This owns:
#   - Input validation (before quota is consumed)
#   - Admission control keyed by client identifier
#   - The single provider attempt, bounded by the configured deadline
#   - Mapping every branch to ExtensionResult | ErrorOutcome
# No retries: a failed attempt is returned as-is and retrying is the
# caller's call.
# ─────────────────────────────────────────────────────────────────────────────


import time

import structlog
from opentelemetry import trace

from quotegate.config import Settings
from quotegate.exceptions import ErrorOutcome
from quotegate.providers.base import QuoteProvider
from quotegate.schemas import ExtensionResult
from quotegate.services.admission import AdmissionController
from quotegate.services.validator import validate

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)


class RequestOrchestrator:
    """Runs one extension request through validation, admission and the provider.

    Collaborators are injected once at startup. The admission controller
    is shared by every request in the process.
    """

    def __init__(
        self,
        admission: AdmissionController,
        provider: QuoteProvider,
        settings: Settings,
    ) -> None:
        self._admission = admission
        self._provider = provider
        self._settings = settings

    async def handle(
        self, raw: bytes | str, client_identifier: str
    ) -> ExtensionResult | ErrorOutcome:
        """Process a raw request body for ``client_identifier``.

        Never raises: an exception escaping a collaborator is logged and
        returned as an ``unexpected`` outcome.
        """
        with tracer.start_as_current_span("extend_quote") as span:
            try:
                result = await self._handle(raw, client_identifier)
            except Exception as e:
                logger.exception("orchestrator_unexpected_error", client=client_identifier)
                result = ErrorOutcome.unexpected(f"{type(e).__name__}: {e}")

            outcome = "success" if isinstance(result, ExtensionResult) else result.kind.value
            span.set_attribute("outcome", outcome)
            return result

    async def _handle(
        self, raw: bytes | str, client_identifier: str
    ) -> ExtensionResult | ErrorOutcome:
        # 1. Validate
        request = validate(raw, max_length=self._settings.max_quote_length)
        if isinstance(request, ErrorOutcome):
            return request

        # 2. Admission
        decision = self._admission.check_limit(client_identifier)
        if not decision.allowed:
            return ErrorOutcome.rate_limited(decision.retry_after_seconds)

        # 3. Provider call with caller-side deadline
        start = time.perf_counter()
        timeout = self._settings.provider_timeout_seconds
        with tracer.start_as_current_span("provider_extend"):
            extended = await self._provider.extend(request.quote, timeout=timeout)
        elapsed = int((time.perf_counter() - start) * 1000)

        if isinstance(extended, str) and not extended.strip():
            extended = ErrorOutcome.provider_failure("empty response")
        if isinstance(extended, ErrorOutcome):
            logger.warning(
                "extension_failed",
                client=client_identifier,
                kind=extended.kind.value,
                time_ms=elapsed,
            )
            return extended

        # 4. Build result
        logger.info(
            "extension_complete",
            client=client_identifier,
            quote_chars=len(request.quote),
            time_ms=elapsed,
        )
        return ExtensionResult(original_quote=request.quote, extended_quote=extended)
