from .parsing import extract_json_block, extract_structured, ExtractionResult
from .validation import InputValidator, sanitize_input
from .hashing import fingerprint
from .rate_limiter import FixedWindowRateLimiter, InMemoryCounterStore, RateLimitDecision

__all__ = [
    "extract_json_block",
    "extract_structured",
    "ExtractionResult",
    "InputValidator",
    "sanitize_input",
    "fingerprint",
    "FixedWindowRateLimiter",
    "InMemoryCounterStore",
    "RateLimitDecision",
]
