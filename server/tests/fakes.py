# ─────────────────────────────────────────────────────────────────────────────
# Test Doubles — clock and provider
# ─────────────────────────────────────────────────────────────────────────────

from quotegate.exceptions import ErrorOutcome


class FakeClock:
    """Manually advanced millisecond clock for window arithmetic."""

    def __init__(self, start: int = 1_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeProvider:
    """Quote provider test double that records every call."""

    def __init__(
        self,
        suffix: str = " ...but only on weekends.",
        outcome: ErrorOutcome | None = None,
        configured: bool = True,
        reply: str | None = None,
    ) -> None:
        self.suffix = suffix
        self.outcome = outcome
        self.configured = configured
        self.reply = reply
        self.calls: list[tuple[str, float | None]] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def extend(self, quote: str, timeout: float | None = None) -> str | ErrorOutcome:
        self.calls.append((quote, timeout))
        if self.outcome is not None:
            return self.outcome
        if self.reply is not None:
            return self.reply
        return f"{quote}{self.suffix}"
