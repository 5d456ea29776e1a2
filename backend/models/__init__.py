from .verdicts import (
    VerdictStatus,
    VERDICT_STATUSES,
    VerdictSource,
    Verdict,
    FactCheckResult,
)
from .api_responses import (
    SourceModel,
    FactCheckRequest,
    FactCheckResponse,
    ErrorResponse,
    RateLimitResponse,
    ServerErrorResponse,
)

__all__ = [
    "VerdictStatus",
    "VERDICT_STATUSES",
    "VerdictSource",
    "Verdict",
    "FactCheckResult",

    "SourceModel",
    "FactCheckRequest",
    "FactCheckResponse",
    "ErrorResponse",
    "RateLimitResponse",
    "ServerErrorResponse",
]
