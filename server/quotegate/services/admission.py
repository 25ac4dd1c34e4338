# ─────────────────────────────────────────────────────────────────────────────
# Admission Controller — fixed-window per-client request counter
# ─────────────────────────────────────────────────────────────────────────────
# One instance per process, created in the lifespan and injected into the
# orchestrator. The identifier → entry map is private; callers only see
# check_limit() and clear().
#
# Expiry is lazy: every check sweeps expired entries under the same lock as
# the read-modify-write, so no background timer is needed and expiry can
# never race an increment.
# ─────────────────────────────────────────────────────────────────────────────


import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from quotegate.config import Settings

logger = structlog.get_logger(__name__)


def _monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


@dataclass
class RateWindowEntry:
    """Per-identifier counter for the current window."""

    count: int
    reset_at: int  # milliseconds on the controller's clock


@dataclass(frozen=True)
class AdmissionDecision:
    """Result of a single admission check. Never stored."""

    allowed: bool
    retry_after_seconds: int | None = None

    @classmethod
    def allow(cls) -> "AdmissionDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, retry_after_seconds: int) -> "AdmissionDecision":
        return cls(allowed=False, retry_after_seconds=retry_after_seconds)


class AdmissionController:
    """Fixed-window rate limiter keyed by client identifier.

    A window opens on the first request from an identifier and lasts
    ``window_ms``. Up to ``max_requests`` checks are allowed inside it;
    after that every check is denied with the number of whole seconds
    until the window resets. Once the window has elapsed the next check
    starts a fresh window with a count of 1.

    Thread-safe: a single lock covers the whole map. Contention is low
    (one short critical section per request), so per-identifier locking
    isn't worth the bookkeeping.

    Args:
        max_requests: Allowed checks per identifier per window.
        window_ms: Window length in milliseconds.
        clock: Monotonic time source in integer milliseconds. Injectable
            for tests.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_ms: int = 60_000,
        clock: Callable[[], int] = _monotonic_ms,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_ms < 1:
            raise ValueError("window_ms must be at least 1")
        self._max_requests = max_requests
        self._window_ms = window_ms
        self._clock = clock
        self._entries: dict[str, RateWindowEntry] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdmissionController":
        return cls(
            max_requests=settings.rate_limit_requests,
            window_ms=settings.rate_limit_window_ms,
        )

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def tracked_identifiers(self) -> int:
        """Number of entries currently held (expired ones included until swept)."""
        with self._lock:
            return len(self._entries)

    def check_limit(self, identifier: str) -> AdmissionDecision:
        """Record a request from ``identifier`` and decide whether it may proceed."""
        with self._lock:
            now = self._clock()
            self._sweep(now)

            entry = self._entries.get(identifier)
            if entry is None or now >= entry.reset_at:
                self._entries[identifier] = RateWindowEntry(
                    count=1, reset_at=now + self._window_ms
                )
                return AdmissionDecision.allow()

            if entry.count < self._max_requests:
                entry.count += 1
                return AdmissionDecision.allow()

            # Clamp: a skewed clock must never yield "retry in 0s".
            retry_after = max(1, math.ceil((entry.reset_at - now) / 1000))

        logger.warning(
            "admission_denied",
            identifier=identifier,
            limit=self._max_requests,
            retry_after=retry_after,
        )
        return AdmissionDecision.deny(retry_after)

    def clear(self) -> None:
        """Drop all counters. Test harness use only."""
        with self._lock:
            self._entries.clear()

    def _sweep(self, now: int) -> None:
        # Caller holds the lock.
        expired = [key for key, entry in self._entries.items() if entry.reset_at <= now]
        for key in expired:
            del self._entries[key]
