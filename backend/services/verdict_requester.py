from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from config import FALLBACK_CONFIDENCE, LLM_CONFIG, SOURCE_LIMITS, Settings, get_settings, logger
from exceptions import InvalidInputException, LLMException
from models.verdicts import Verdict, VerdictSource, VerdictStatus
from prompts import FACT_CHECK_PROMPT
from utils.parsing import ExtractionResult, extract_structured
from utils.validation import sanitize_input
from .llm import call_gemini
from .reference_sources import (
    manual_verification_sources,
    search_source,
    search_url,
    suggest_official_sources,
)

DEFAULT_JUSTIFICATION = "Análise realizada com base em verificação de fontes online."
UNAVAILABLE_JUSTIFICATION = (
    "Não foi possível verificar completamente a informação devido a dificuldades técnicas "
    "temporárias. Recomenda-se consultar fontes oficiais e veículos de imprensa confiáveis "
    "para confirmação."
)

STATUS_ALIASES: Dict[str, VerdictStatus] = {
    "real": "real",
    "true": "real",
    "verdadeiro": "real",
    "fake": "fake",
    "false": "fake",
    "falso": "fake",
    "uncertain": "uncertain",
    "incerto": "uncertain",
}

Completion = Callable[[str], Awaitable[Dict[str, Any]]]


@dataclass(frozen=True)
class VerdictOutcome:
    """
    Result of one verdict request. ``degraded`` marks the safe default produced
    when the external service could not be used.
    """
    verdict: Verdict
    audit: Dict[str, Any] = field(default_factory=dict)
    degraded: bool = False


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _bounded_str(value: Any, default: str, limit: int) -> str:
    if not isinstance(value, str) or not value.strip():
        return default
    return value.strip()[:limit]


def normalize_status(value: Any) -> VerdictStatus:
    if isinstance(value, str):
        return STATUS_ALIASES.get(value.strip().lower(), "uncertain")
    return "uncertain"


def normalize_confidence(value: Any, status: VerdictStatus) -> int:
    default = FALLBACK_CONFIDENCE.UNCERTAIN if status == "uncertain" else FALLBACK_CONFIDENCE.DECISIVE
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not 0 <= value <= 100:
        return default
    return int(round(value))


def normalize_sources(value: Any) -> List[VerdictSource]:
    if not isinstance(value, list):
        return []

    sources: List[VerdictSource] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        sources.append({
            "title": _bounded_str(item.get("title"), "Fonte não identificada", SOURCE_LIMITS.TITLE_LENGTH),
            "url": _bounded_str(item.get("url"), "#", SOURCE_LIMITS.URL_LENGTH),
            "summary": _bounded_str(item.get("summary"), "Resumo não disponível", SOURCE_LIMITS.SUMMARY_LENGTH),
        })
        if len(sources) == SOURCE_LIMITS.MAX_SOURCES:
            break
    return sources


def quote_sources(value: Any) -> List[VerdictSource]:
    """Turn the model's literal quotes from the input into searchable sources."""
    if not isinstance(value, list):
        return []

    quotes = [q.strip() for q in value if isinstance(q, str) and q.strip()]
    return [
        {
            "title": f"Trecho Analisado {index}",
            "url": search_url(quote),
            "summary": f'"{quote[:200]}" - Trecho do texto analisado'[:SOURCE_LIMITS.SUMMARY_LENGTH],
        }
        for index, quote in enumerate(quotes[:SOURCE_LIMITS.MAX_QUOTE_SOURCES], start=1)
    ]


def normalize_verdict(data: Dict[str, Any], text: str) -> Verdict:
    """Clamp a structured model answer into a valid verdict. Never raises."""
    status = normalize_status(_first_present(data, "status", "classe", "class", "verdict"))
    confidence = normalize_confidence(_first_present(data, "confidence", "confianca"), status)
    justification = _bounded_str(
        _first_present(data, "justification", "justificativa"),
        DEFAULT_JUSTIFICATION,
        SOURCE_LIMITS.JUSTIFICATION_LENGTH,
    )

    sources = normalize_sources(_first_present(data, "sources", "fontes"))
    if not sources:
        sources = quote_sources(_first_present(data, "trechos", "quotes"))
    if not sources:
        sources = suggest_official_sources(text)
    if not sources:
        sources = [search_source(text)]

    return {
        "status": status,
        "confidence": confidence,
        "justification": justification,
        "sources": sources[:SOURCE_LIMITS.MAX_SOURCES],
    }


def unavailable_verdict(text: str) -> Verdict:
    return {
        "status": "uncertain",
        "confidence": FALLBACK_CONFIDENCE.SERVICE_UNAVAILABLE,
        "justification": UNAVAILABLE_JUSTIFICATION,
        "sources": manual_verification_sources(text),
    }


class VerdictRequester:
    """Prompts the classification model and turns whatever comes back into a Verdict."""

    def __init__(self, settings: Optional[Settings] = None, completion: Optional[Completion] = None):
        self.settings = settings or get_settings()
        self.completion = completion

    async def _complete(self, prompt: str) -> Dict[str, Any]:
        if self.completion is not None:
            return await self.completion(prompt)
        return await call_gemini(prompt, self.settings)

    def _fallback(self, text: str, reason: str) -> VerdictOutcome:
        return VerdictOutcome(
            verdict=unavailable_verdict(text),
            audit={"error": reason, "fallback": True},
            degraded=True,
        )

    async def request_verdict(self, text: str) -> VerdictOutcome:
        try:
            text = sanitize_input(text)
        except InvalidInputException as e:
            logger.warning("Verdict requested for invalid text: %s", e.message)
            return self._fallback(text if isinstance(text, str) else "", "invalid_input")

        try:
            logger.info("Calling Gemini API for fact-check: %s...", text[:50])
            response = await self._complete(FACT_CHECK_PROMPT.format(text=text))
            raw_text = response.get("text", "")

            extraction: ExtractionResult = extract_structured(raw_text)
            if extraction.data is None:
                logger.error("Gemini response could not be salvaged.")
                return self._fallback(text, "unparseable_response")

            if extraction.stage != "strict":
                logger.warning("Gemini response parsed via %s stage.", extraction.stage)

            verdict = normalize_verdict(extraction.data, text)
            audit = {
                "success": True,
                "extraction": extraction.stage,
                "model": self.settings.GEMINI_MODEL,
                "response_text": raw_text[:LLM_CONFIG.MAX_AUDIT_TEXT_LENGTH],
            }
            return VerdictOutcome(verdict=verdict, audit=audit)

        except LLMException as e:
            logger.error("Error in request_verdict: %s", e.message)
            return self._fallback(text, e.details.get("reason", e.message))
        except Exception:
            logger.exception("Unexpected error while requesting verdict.")
            return self._fallback(text, "unexpected_error")
