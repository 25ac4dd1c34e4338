from typing import Protocol

from quotegate.exceptions import ErrorOutcome


class QuoteProvider(Protocol):
    """Anything that can extend a quote through an external text model.

    Implementations never raise for provider-side problems; they return an
    ErrorOutcome instead. ``timeout`` is the caller's deadline in seconds.
    """

    @property
    def is_configured(self) -> bool: ...

    async def extend(self, quote: str, timeout: float | None = None) -> str | ErrorOutcome: ...
