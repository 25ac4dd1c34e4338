# ─────────────────────────────────────────────────────────────────────────────
# Request / Response Schemas — Pydantic v2
# ─────────────────────────────────────────────────────────────────────────────
# Wire format is camelCase (originalQuote, retryAfter); Python attributes
# stay snake_case via the alias generator.
# ─────────────────────────────────────────────────────────────────────────────


from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ExtensionRequest(_CamelModel):
    """A validated, trimmed quote ready for the provider."""

    quote: str = Field(min_length=1)


class ExtensionResult(_CamelModel):
    """Successful response body for POST /api/extend-quote."""

    original_quote: str = Field(min_length=1)
    extended_quote: str = Field(min_length=1)


class ErrorResponse(_CamelModel):
    """Error body. ``retryAfter`` is only present on 429."""

    error: str
    retry_after: int | None = None


class LivenessResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    status: str
    provider_configured: bool
    model: str
