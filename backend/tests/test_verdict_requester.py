import pytest
from unittest.mock import AsyncMock

from exceptions import LLMException
from models.verdicts import VERDICT_STATUSES
from services.verdict_requester import (
    DEFAULT_JUSTIFICATION,
    VerdictRequester,
    normalize_confidence,
    normalize_sources,
    normalize_status,
    normalize_verdict,
)

TEXT = "O Amazonas é o maior estado do Brasil"


def _requester(settings, text=None, side_effect=None):
    completion = AsyncMock(return_value={"raw": {}, "text": text}, side_effect=side_effect)
    return VerdictRequester(settings, completion=completion), completion


class TestNormalizeFields:

    @pytest.mark.parametrize("value,expected", [
        ("true", "real"),
        ("TRUE", "real"),
        ("real", "real"),
        ("false", "fake"),
        ("falso", "fake"),
        ("uncertain", "uncertain"),
        ("maybe", "uncertain"),
        (None, "uncertain"),
        (1, "uncertain"),
    ])
    def test_status(self, value, expected):
        assert normalize_status(value) == expected

    @pytest.mark.parametrize("value,status,expected", [
        (90, "real", 90),
        (72.6, "fake", 73),
        (0, "fake", 0),
        (100, "real", 100),
        (150, "real", 80),
        (-5, "fake", 80),
        ("90", "real", 80),
        (True, "real", 80),
        (None, "uncertain", 50),
        (float("nan"), "uncertain", 50),
    ])
    def test_confidence(self, value, status, expected):
        assert normalize_confidence(value, status) == expected

    def test_sources_are_bounded(self):
        raw = [{"title": "t" * 300, "url": "u" * 600, "summary": "s" * 400}] * 8
        sources = normalize_sources(raw)
        assert len(sources) == 5
        assert len(sources[0]["title"]) == 200
        assert len(sources[0]["url"]) == 500
        assert len(sources[0]["summary"]) == 300

    def test_sources_fill_missing_fields(self):
        sources = normalize_sources([{"title": "IBGE"}, "not a dict", None])
        assert sources == [{"title": "IBGE", "url": "#", "summary": "Resumo não disponível"}]

    def test_sources_not_a_list(self):
        assert normalize_sources({"title": "x"}) == []


class TestNormalizeVerdict:

    def test_portuguese_keys(self):
        verdict = normalize_verdict(
            {"classe": "false", "confianca": 85, "justificativa": "Não há registro oficial."},
            "Vacina X causa efeito Y em todos",
        )
        assert verdict["status"] == "fake"
        assert verdict["confidence"] == 85
        assert verdict["justification"] == "Não há registro oficial."

    def test_justification_fallback_and_truncation(self):
        assert normalize_verdict({"justification": "   "}, TEXT)["justification"] == DEFAULT_JUSTIFICATION
        assert len(normalize_verdict({"justification": "x" * 1500}, TEXT)["justification"]) == 1000

    def test_quotes_become_sources(self):
        verdict = normalize_verdict({"classe": "true", "trechos": ["maior estado", "Brasil", "Amazonas", "extra"]}, TEXT)
        assert [s["title"] for s in verdict["sources"]] == [
            "Trecho Analisado 1", "Trecho Analisado 2", "Trecho Analisado 3"
        ]
        assert verdict["sources"][0]["url"].startswith("https://www.google.com/search?q=")

    def test_topic_reference_sources(self):
        verdict = normalize_verdict({"classe": "false"}, "A vacina contra covid altera o DNA humano")
        urls = [s["url"] for s in verdict["sources"]]
        assert "https://www.gov.br/anvisa/pt-br/assuntos/medicamentos/vacinas" in urls
        assert len(verdict["sources"]) <= 4

    def test_generic_source_when_nothing_else(self):
        verdict = normalize_verdict({"classe": "true"}, TEXT)
        assert len(verdict["sources"]) == 1
        assert "Amazonas" in verdict["sources"][0]["url"]

    def test_model_sources_take_precedence(self):
        verdict = normalize_verdict(
            {"classe": "true", "fontes": [{"title": "IBGE", "url": "https://www.ibge.gov.br", "summary": "Área territorial"}],
             "trechos": ["maior estado"]},
            TEXT,
        )
        assert verdict["sources"] == [
            {"title": "IBGE", "url": "https://www.ibge.gov.br", "summary": "Área territorial"}
        ]


@pytest.mark.asyncio
class TestRequestVerdict:

    async def test_strict_json(self, settings):
        requester, completion = _requester(settings, '{"classe": "true", "confianca": 90, "justificativa": "Correto."}')

        outcome = await requester.request_verdict(TEXT)

        assert outcome.degraded is False
        assert outcome.verdict["status"] == "real"
        assert outcome.verdict["confidence"] == 90
        assert outcome.audit["extraction"] == "strict"
        assert TEXT in completion.call_args.args[0]

    async def test_fenced_json_with_prose(self, settings, sample_gemini_response):
        text = sample_gemini_response["candidates"][0]["content"]["parts"][0]["text"]
        requester, _ = _requester(settings, "Segue a análise:\n" + text)

        outcome = await requester.request_verdict(TEXT)

        assert outcome.verdict["status"] == "real"
        assert outcome.verdict["sources"][0]["title"] == "Trecho Analisado 1"

    async def test_prose_only_uses_keyword_fallback(self, settings):
        requester, _ = _requester(settings, "Essa notícia é falsa, não há qualquer registro.")

        outcome = await requester.request_verdict(TEXT)

        assert outcome.degraded is False
        assert outcome.audit["extraction"] == "keyword"
        assert outcome.verdict["status"] == "fake"
        assert outcome.verdict["confidence"] == 80
        assert outcome.verdict["sources"]

    async def test_invalid_status_is_coerced(self, settings):
        requester, _ = _requester(settings, '{"classe": "probably", "confianca": 300}')

        outcome = await requester.request_verdict(TEXT)

        assert outcome.verdict["status"] == "uncertain"
        assert outcome.verdict["confidence"] == 50

    async def test_external_failure_returns_safe_default(self, settings):
        requester, _ = _requester(settings, side_effect=LLMException("HTTP 500"))

        outcome = await requester.request_verdict(TEXT)

        assert outcome.degraded is True
        assert outcome.verdict["status"] == "uncertain"
        assert outcome.verdict["confidence"] <= 40
        assert outcome.verdict["sources"][0]["url"]
        assert outcome.audit == {"error": "HTTP 500", "fallback": True}

    async def test_empty_response_returns_safe_default(self, settings):
        requester, _ = _requester(settings, "")

        outcome = await requester.request_verdict(TEXT)

        assert outcome.degraded is True
        assert outcome.audit["error"] == "unparseable_response"

    async def test_unexpected_error_is_contained(self, settings):
        requester, _ = _requester(settings, side_effect=RuntimeError("boom"))

        outcome = await requester.request_verdict(TEXT)

        assert outcome.degraded is True
        assert outcome.verdict["status"] in VERDICT_STATUSES

    async def test_missing_api_key(self, database_url):
        from config import Settings
        requester = VerdictRequester(Settings(GEMINI_API_KEY=None, DATABASE_URL=database_url))

        outcome = await requester.request_verdict(TEXT)

        assert outcome.degraded is True
        assert outcome.audit["error"] == "API key not configured"

    async def test_invalid_text_is_not_sent(self, settings):
        requester, completion = _requester(settings, '{"classe": "true"}')

        outcome = await requester.request_verdict("<curto>")

        assert outcome.degraded is True
        completion.assert_not_called()
