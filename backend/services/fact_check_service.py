import asyncio
from typing import Any, Optional

from config import Settings, get_settings, logger
from exceptions import PersistenceException, RateLimitException
from models.verdicts import FactCheckResult, Verdict
from storage.cache import CacheStore
from utils.hashing import fingerprint
from utils.rate_limiter import FixedWindowRateLimiter
from utils.validation import sanitize_input
from .verdict_requester import VerdictOutcome, VerdictRequester


class FactCheckService:
    """
    Sequences one request: sanitize -> rate limit -> cache lookup ->
    (on miss) verdict request -> persist -> respond.

    Client errors surface as InvalidInputException / RateLimitException.
    External and persistence failures never do.
    """

    def __init__(
        self,
        cache: CacheStore,
        rate_limiter: FixedWindowRateLimiter,
        requester: VerdictRequester,
        settings: Optional[Settings] = None,
    ):
        self.cache = cache
        self.rate_limiter = rate_limiter
        self.requester = requester
        self.settings = settings or get_settings()

    async def check(self, raw_text: Any, client_id: str) -> FactCheckResult:
        start_time = asyncio.get_running_loop().time()

        text = sanitize_input(raw_text)

        decision = self.rate_limiter.check(client_id)
        if not decision.allowed:
            logger.warning(
                "Rate limit exceeded",
                extra={"client": client_id, "retry_after": decision.retry_after}
            )
            raise RateLimitException(client_id, decision.retry_after)

        key = fingerprint(text)
        logger.info("Processing fact-check request for text: %s... (hash %s)", text[:50], key)

        try:
            cached = await self.cache.lookup(key)
        except PersistenceException as e:
            logger.error("Cache lookup failed, treating as miss: %s", e.message)
            cached = None

        if cached is not None:
            logger.info("Cache hit for %s", key)
            return self._result(cached, cached=True)

        outcome = await self.requester.request_verdict(text)
        verdict = await self._persist(key, text, outcome)

        duration = round(asyncio.get_running_loop().time() - start_time, 2)
        logger.info(
            "Fact-check completed: %s %s%% in %ss",
            verdict["status"], verdict["confidence"], duration
        )
        return self._result(verdict, cached=False)

    async def _persist(self, key: str, text: str, outcome: VerdictOutcome) -> Verdict:
        """Store the verdict; returns the verdict that should be served."""
        if outcome.degraded and not self.settings.CACHE_DEGRADED_VERDICTS:
            logger.info("Not caching degraded verdict for %s", key)
            return outcome.verdict

        try:
            write = await self.cache.insert(key, text, outcome.verdict, outcome.audit)
        except Exception:
            logger.exception("Unexpected error while caching verdict for %s", key)
            return outcome.verdict

        if write.status == "conflict":
            # Another request stored this fingerprint first; serve its row.
            try:
                stored = await self.cache.lookup(key)
            except PersistenceException as e:
                logger.error("Re-read after insert conflict failed: %s", e.message)
                stored = None
            return stored if stored is not None else outcome.verdict
        if write.status == "failed":
            logger.error("Failed to cache verdict for %s: %s", key, write.detail)
        return outcome.verdict

    @staticmethod
    def _result(verdict: Verdict, cached: bool) -> FactCheckResult:
        return {
            "status": verdict["status"],
            "confidence": verdict["confidence"],
            "justification": verdict["justification"],
            "sources": list(verdict["sources"]),
            "cached": cached,
        }
