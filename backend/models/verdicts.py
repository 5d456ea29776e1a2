from typing import TypedDict, Literal, List

VerdictStatus = Literal["real", "fake", "uncertain"]

VERDICT_STATUSES = ("real", "fake", "uncertain")

class VerdictSource(TypedDict):
    """A supporting link shown under the verdict."""
    title: str
    url: str
    summary: str

class Verdict(TypedDict):
    """Canonical classification result, as cached and as returned."""
    status: VerdictStatus
    confidence: int
    justification: str
    sources: List[VerdictSource]

class FactCheckResult(Verdict):
    """Verdict plus whether it was served from the cache."""
    cached: bool
