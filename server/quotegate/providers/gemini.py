# ─────────────────────────────────────────────────────────────────────────────
# Gemini Provider — Google AI generateContent over httpx
# ─────────────────────────────────────────────────────────────────────────────
# Every failure leaves this module as an ErrorOutcome value:
#   - missing / rejected credential → provider_config (not retryable)
#   - caller deadline exceeded      → timeout
#   - anything else                 → provider_failure
# The deadline belongs to the caller; this adapter only enforces the one it
# is handed.
# ─────────────────────────────────────────────────────────────────────────────


import asyncio

import httpx
import structlog

from quotegate.config import Settings
from quotegate.exceptions import ErrorOutcome
from quotegate.pipeline.prompt_templates import get_extension_prompt

logger = structlog.get_logger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.6
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class _ProviderError(Exception):
    """Internal: carries an outcome out of the request helper."""

    def __init__(self, outcome: ErrorOutcome):
        self.outcome = outcome
        super().__init__(outcome.detail or outcome.message)


class GeminiProvider:
    """Extends quotes with a Gemini text model.

    The credential is checked once, here in the constructor. Without one
    the provider stays usable but every ``extend`` call short-circuits to
    ``provider_config`` without touching the network, so a misconfigured
    process fails fast and loudly instead of on some later request.

    Pass a shared ``http_client`` for connection pooling (the app lifespan
    does). Otherwise each call opens and closes its own client.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key.strip()
        self.model = model
        self.temperature = temperature
        self._url = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self._http_client = http_client

        if not self._api_key:
            logger.error("provider_credentials_missing", provider="gemini", env_var="GEMINI_API_KEY")

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> "GeminiProvider":
        return cls(
            api_key=settings.gemini_api_key.get_secret_value(),
            model=settings.gemini_model,
            temperature=settings.gemini_temperature,
            base_url=settings.gemini_base_url,
            http_client=http_client,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def extend(self, quote: str, timeout: float | None = None) -> str | ErrorOutcome:
        """Ask the model to extend ``quote`` and return the combined text.

        Args:
            quote: Validated, trimmed quote.
            timeout: Caller deadline in seconds. On expiry the in-flight
                request is cancelled and a ``timeout`` outcome is returned.
                ``None`` means no deadline beyond the HTTP client's own.

        Returns:
            The trimmed extended quote, or an ErrorOutcome.
        """
        if not self.is_configured:
            return ErrorOutcome.provider_config("GEMINI_API_KEY is not set")

        try:
            return await asyncio.wait_for(self._generate(quote), timeout=timeout)
        except TimeoutError:
            logger.warning("provider_timeout", model=self.model, timeout_s=timeout)
            return ErrorOutcome.timeout(timeout)
        except _ProviderError as e:
            logger.error(
                "provider_error",
                model=self.model,
                kind=e.outcome.kind.value,
                detail=e.outcome.detail,
            )
            return e.outcome

    # ── Internals ────────────────────────────────────────────────────────────

    def _build_payload(self, quote: str) -> dict:
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": get_extension_prompt(quote)}],
                }
            ],
            "generationConfig": {"temperature": self.temperature},
        }

    async def _generate(self, quote: str) -> str:
        data = await self._post(self._build_payload(quote))
        text = _extract_text(data).strip()
        if not text:
            raise _ProviderError(ErrorOutcome.provider_failure("empty response"))
        logger.info("provider_generated", model=self.model, chars=len(text))
        return text

    async def _post(self, payload: dict) -> dict:
        headers = {"x-goog-api-key": self._api_key, "Content-Type": "application/json"}
        try:
            if self._http_client is not None:
                resp = await self._http_client.post(self._url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await client.post(self._url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise _ProviderError(
                ErrorOutcome.provider_failure(f"transport timeout: {type(e).__name__}")
            ) from e
        except httpx.HTTPError as e:
            raise _ProviderError(
                ErrorOutcome.provider_failure(f"transport error: {type(e).__name__}")
            ) from e

        if _is_credential_rejection(resp):
            raise _ProviderError(
                ErrorOutcome.provider_config(f"credential rejected (HTTP {resp.status_code})")
            )
        if resp.is_error:
            raise _ProviderError(ErrorOutcome.provider_failure(f"HTTP {resp.status_code}"))

        try:
            data = resp.json()
        except ValueError as e:
            raise _ProviderError(ErrorOutcome.provider_failure("undecodable response body")) from e
        if not isinstance(data, dict):
            raise _ProviderError(ErrorOutcome.provider_failure("unexpected response shape"))
        return data


def _is_credential_rejection(resp: httpx.Response) -> bool:
    """401/403, or Google's 400 INVALID_ARGUMENT naming the API key."""
    if resp.status_code in (401, 403):
        return True
    return resp.status_code == 400 and "API_KEY" in resp.text


def _extract_text(data: dict) -> str:
    """Concatenate the text parts of the first candidate.

    Safety blocks (no candidates + promptFeedback.blockReason, or a
    SAFETY finish reason) raise provider_failure naming the reason.
    """
    candidates = data.get("candidates") or []
    if not isinstance(candidates, list):
        raise _ProviderError(ErrorOutcome.provider_failure("unexpected response shape"))
    if not candidates:
        feedback = data.get("promptFeedback")
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if block_reason:
            raise _ProviderError(ErrorOutcome.provider_failure(f"prompt blocked: {block_reason}"))
        return ""

    candidate = candidates[0]
    if not isinstance(candidate, dict):
        raise _ProviderError(ErrorOutcome.provider_failure("unexpected response shape"))
    if candidate.get("finishReason") == "SAFETY":
        raise _ProviderError(ErrorOutcome.provider_failure("response blocked: SAFETY"))

    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    # Non-text parts (and null text) contribute nothing.
    return "".join(
        p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)
    )
