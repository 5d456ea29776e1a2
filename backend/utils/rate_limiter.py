import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol


@dataclass
class RateLimitCounter:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after: int = 0


class CounterStore(Protocol):

    def get(self, client_id: str) -> Optional[RateLimitCounter]: ...

    def put(self, client_id: str, counter: RateLimitCounter) -> None: ...

    def clear(self) -> None: ...

    def prune(self, now: float) -> int: ...


class InMemoryCounterStore:
    """Process-local counters. Lost on restart and not shared between workers."""

    def __init__(self):
        self._counters: Dict[str, RateLimitCounter] = {}

    def get(self, client_id: str) -> Optional[RateLimitCounter]:
        return self._counters.get(client_id)

    def put(self, client_id: str, counter: RateLimitCounter) -> None:
        self._counters[client_id] = counter

    def clear(self) -> None:
        self._counters.clear()

    def prune(self, now: float) -> int:
        """Drop counters whose window has expired; returns how many were removed."""
        expired = [key for key, counter in self._counters.items() if now > counter.reset_at]
        for key in expired:
            del self._counters[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._counters)


class FixedWindowRateLimiter:
    """
    Fixed-window request counter per client id.

    Windows start at a client's first request, so a burst straddling a window
    boundary can briefly see up to twice the nominal rate.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        store: Optional[CounterStore] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.store = store if store is not None else InMemoryCounterStore()
        self.clock = clock
        self._next_prune = clock() + window_seconds

    def check(self, client_id: str) -> RateLimitDecision:
        now = self.clock()
        if now > self._next_prune:
            self.store.prune(now)
            self._next_prune = now + self.window_seconds

        counter = self.store.get(client_id)

        if counter is None or now > counter.reset_at:
            self.store.put(client_id, RateLimitCounter(count=1, reset_at=now + self.window_seconds))
            return RateLimitDecision(allowed=True)

        if counter.count >= self.max_requests:
            retry_after = max(1, math.ceil(counter.reset_at - now))
            return RateLimitDecision(allowed=False, retry_after=retry_after)

        counter.count += 1
        self.store.put(client_id, counter)
        return RateLimitDecision(allowed=True)

    def allow(self, client_id: str) -> bool:
        return self.check(client_id).allowed

    def reset(self) -> None:
        self.store.clear()
        self._next_prune = self.clock() + self.window_seconds
