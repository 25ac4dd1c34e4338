# ─────────────────────────────────────────────────────────────────────────────
# Error Outcomes + FastAPI Exception Handlers
# ─────────────────────────────────────────────────────────────────────────────
# Inside the core, failures are ErrorOutcome *values* returned from each
# component. Only the HTTP edge turns them into an exception
# (QuoteGatewayError) so the registered handler can render the JSON body.
# ─────────────────────────────────────────────────────────────────────────────


from dataclasses import dataclass
from enum import StrEnum

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


# ── Outcome taxonomy ─────────────────────────────────────────────────────────


class ErrorKind(StrEnum):
    MALFORMED = "malformed"
    EMPTY = "empty"
    TOO_LONG = "too_long"
    RATE_LIMITED = "rate_limited"
    PROVIDER_CONFIG = "provider_config"
    PROVIDER_FAILURE = "provider_failure"
    TIMEOUT = "timeout"
    UNEXPECTED = "unexpected"


_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.MALFORMED: 400,
    ErrorKind.EMPTY: 400,
    ErrorKind.TOO_LONG: 400,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.PROVIDER_CONFIG: 500,
    ErrorKind.PROVIDER_FAILURE: 500,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.UNEXPECTED: 500,
}

_CLIENT_ERRORS = frozenset({ErrorKind.MALFORMED, ErrorKind.EMPTY, ErrorKind.TOO_LONG})


@dataclass(frozen=True)
class ErrorOutcome:
    """A typed failure produced by one of the gateway components.

    ``message`` is always safe to show to the client. Internal detail
    (provider status codes, exception text) goes to ``detail`` and is
    only ever logged.
    """

    kind: ErrorKind
    message: str
    retry_after_seconds: int | None = None
    detail: str | None = None

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]

    @property
    def is_client_error(self) -> bool:
        return self.kind in _CLIENT_ERRORS

    # ── Constructors ─────────────────────────────────────────────────────────

    @classmethod
    def malformed(cls, message: str = "Invalid request body") -> "ErrorOutcome":
        return cls(ErrorKind.MALFORMED, message)

    @classmethod
    def empty(cls) -> "ErrorOutcome":
        return cls(ErrorKind.EMPTY, "Quote cannot be empty")

    @classmethod
    def too_long(cls, limit: int) -> "ErrorOutcome":
        return cls(ErrorKind.TOO_LONG, f"Quote must not exceed {limit} characters")

    @classmethod
    def rate_limited(cls, retry_after_seconds: int) -> "ErrorOutcome":
        return cls(
            ErrorKind.RATE_LIMITED,
            "Too many requests. Please try again later.",
            retry_after_seconds=retry_after_seconds,
        )

    @classmethod
    def provider_config(cls, detail: str | None = None) -> "ErrorOutcome":
        return cls(
            ErrorKind.PROVIDER_CONFIG,
            "Service configuration error. Please contact support.",
            detail=detail,
        )

    @classmethod
    def provider_failure(cls, detail: str | None = None) -> "ErrorOutcome":
        return cls(
            ErrorKind.PROVIDER_FAILURE,
            "Failed to generate quote extension. Please try again.",
            detail=detail,
        )

    @classmethod
    def timeout(cls, timeout_s: float) -> "ErrorOutcome":
        return cls(
            ErrorKind.TIMEOUT,
            "Quote generation timed out. Please try again.",
            detail=f"provider call exceeded {timeout_s}s",
        )

    @classmethod
    def unexpected(cls, detail: str | None = None) -> "ErrorOutcome":
        return cls(
            ErrorKind.UNEXPECTED,
            "An unexpected error occurred. Please try again.",
            detail=detail,
        )


# ── HTTP edge exception ──────────────────────────────────────────────────────


class QuoteGatewayError(Exception):
    """Raised by route handlers to hand an ErrorOutcome to the JSON handler."""

    def __init__(self, outcome: ErrorOutcome):
        self.outcome = outcome
        super().__init__(outcome.message)


def error_response(outcome: ErrorOutcome) -> JSONResponse:
    """Render an outcome as ``{error}`` or ``{error, retryAfter}`` JSON."""
    content: dict[str, object] = {"error": outcome.message}
    headers: dict[str, str] = {}
    if outcome.retry_after_seconds is not None:
        content["retryAfter"] = outcome.retry_after_seconds
        headers["Retry-After"] = str(outcome.retry_after_seconds)
    return JSONResponse(status_code=outcome.status_code, content=content, headers=headers)


# ── Handler registration ────────────────────────────────────────────────────


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app.

    Endpoints raise QuoteGatewayError; these handlers catch it and return
    structured JSON. No inline try/except in endpoints.
    """

    @app.exception_handler(QuoteGatewayError)
    async def gateway_error_handler(request: Request, exc: QuoteGatewayError) -> JSONResponse:
        outcome = exc.outcome
        if outcome.is_client_error:
            logger.info("request_rejected", kind=outcome.kind.value, error=outcome.message)
        elif outcome.kind is not ErrorKind.RATE_LIMITED:
            # Denials are logged once, by the admission controller.
            logger.error("gateway_error", kind=outcome.kind.value, detail=outcome.detail)
        return error_response(outcome)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_error", error=str(exc), exc_info=True)
        return error_response(ErrorOutcome.unexpected())
