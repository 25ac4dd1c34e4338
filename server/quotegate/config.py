# ─────────────────────────────────────────────────────────────────────────────
# Settings — Pydantic v2 BaseSettings
# ─────────────────────────────────────────────────────────────────────────────


from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server configuration sourced from environment variables.

    Uses pydantic-settings v2 (separate package from pydantic).
    Read once at process start; values are fixed for the process lifetime.
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    # ── Provider ─────────────────────────────────────────────────────────────
    gemini_api_key: SecretStr = SecretStr("")
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.6
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    provider_timeout_seconds: float = Field(10.0, gt=0)

    # ── Admission control ────────────────────────────────────────────────────
    rate_limit_requests: int = Field(10, ge=1)
    rate_limit_window_ms: int = Field(60_000, ge=1)

    # ── Limits ───────────────────────────────────────────────────────────────
    max_quote_length: int = 500

    # ── HTTP ─────────────────────────────────────────────────────────────────
    allowed_origins: str = ""  # comma-separated; empty means "*"

    # ── Logging ──────────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool = True


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
