from .llm import call_gemini
from .verdict_requester import VerdictRequester, VerdictOutcome, normalize_verdict
from .fact_check_service import FactCheckService

__all__ = [
    "call_gemini",
    "VerdictRequester",
    "VerdictOutcome",
    "normalize_verdict",
    "FactCheckService",
]
