from dataclasses import dataclass


@dataclass(frozen=True)
class SanitizerConfig:
    MIN_TEXT_LENGTH: int = 10
    MAX_TEXT_LENGTH: int = 2000
    FORBIDDEN_CHARS: str = "<>\"'&"


@dataclass(frozen=True)
class LLMConfig:
    REQUEST_TIMEOUT: float = 30.0
    TEMPERATURE: float = 0.1
    TOP_K: int = 1
    TOP_P: float = 0.8
    MAX_OUTPUT_TOKENS: int = 4096
    MAX_AUDIT_TEXT_LENGTH: int = 4000


@dataclass(frozen=True)
class SourceLimits:
    """Length bounds applied to every verdict field coming back from the model."""
    MAX_SOURCES: int = 5
    MAX_QUOTE_SOURCES: int = 3
    MAX_REFERENCE_SOURCES: int = 4
    TITLE_LENGTH: int = 200
    URL_LENGTH: int = 500
    SUMMARY_LENGTH: int = 300
    JUSTIFICATION_LENGTH: int = 1000
    SEARCH_QUERY_LENGTH: int = 100


@dataclass(frozen=True)
class FallbackConfidence:
    DECISIVE: int = 80
    UNCERTAIN: int = 50
    SERVICE_UNAVAILABLE: int = 30
    UNEXPECTED_ERROR: int = 20


SANITIZER_CONFIG = SanitizerConfig()
LLM_CONFIG = LLMConfig()
SOURCE_LIMITS = SourceLimits()
FALLBACK_CONFIDENCE = FallbackConfidence()
