import re
from typing import List, Tuple
from urllib.parse import quote_plus

from config import SOURCE_LIMITS
from models.verdicts import VerdictSource

GOOGLE_SEARCH_URL = "https://www.google.com/search?q="


def _topic(alternatives: str) -> re.Pattern:
    return re.compile(r"\b(?:" + alternatives + r")\b")


HEALTH = _topic(r"saúde|doença|vírus|vacina|covid|gripe|câncer|medicina|tratamento|cura|remédio|medicamento")
VACCINE = _topic(r"vacina|imunização|vacinação")
COVID = _topic(r"covid|coronav[ií]rus|sars|pandemia")
ENVIRONMENT = _topic(r"amazônia|desmatamento|meio ambiente|clima|aquecimento|floresta|biodiversidade")
ECONOMY = _topic(r"economia|inflação|pib|desemprego|juros|banco central|real|dólar|moeda")
EDUCATION = _topic(r"educação|escola|universidade|ciência|pesquisa|enem|vestibular")


def _source(title: str, url: str, summary: str) -> VerdictSource:
    return {"title": title, "url": url, "summary": summary}


TOPIC_RULES: List[Tuple[re.Pattern, List[VerdictSource]]] = [
    (HEALTH, [_source(
        "Ministério da Saúde - Informações Oficiais sobre Saúde",
        "https://www.gov.br/saude/pt-br",
        "Portal oficial com informações verificadas sobre saúde pública, doenças, tratamentos e medicamentos aprovados no Brasil.",
    )]),
    (VACCINE, [_source(
        "ANVISA - Vacinas e Medicamentos Aprovados",
        "https://www.gov.br/anvisa/pt-br/assuntos/medicamentos/vacinas",
        "Informações oficiais sobre vacinas aprovadas, estudos clínicos e segurança de medicamentos.",
    )]),
    (COVID, [_source(
        "Fiocruz - Dados Científicos COVID-19",
        "https://portal.fiocruz.br/covid-19-perguntas-e-respostas",
        "Pesquisas científicas, dados epidemiológicos e informações verificadas sobre COVID-19 no Brasil.",
    )]),
    (ENVIRONMENT, [
        _source(
            "INPE - Monitoramento da Amazônia",
            "https://www.gov.br/inpe/pt-br",
            "Dados oficiais de desmatamento, queimadas e monitoramento ambiental da Amazônia via satélite.",
        ),
        _source(
            "IBAMA - Fiscalização Ambiental",
            "https://www.gov.br/ibama/pt-br",
            "Informações sobre fiscalização ambiental, unidades de conservação e políticas de proteção.",
        ),
    ]),
    (ECONOMY, [
        _source(
            "Banco Central - Indicadores Econômicos",
            "https://www.bcb.gov.br/estatisticas",
            "Dados oficiais sobre inflação, PIB, taxa de juros, câmbio e outros indicadores econômicos.",
        ),
        _source(
            "IBGE - Estatísticas Nacionais",
            "https://www.ibge.gov.br/estatisticas",
            "Censos, pesquisas demográficas, dados de emprego e estatísticas socioeconômicas oficiais.",
        ),
    ]),
    (EDUCATION, [
        _source(
            "MEC - Ministério da Educação",
            "https://www.gov.br/mec/pt-br",
            "Políticas educacionais, dados sobre ensino superior e básico, ENEM e programas educacionais.",
        ),
        _source(
            "CAPES - Portal de Periódicos Científicos",
            "https://www.periodicos.capes.gov.br/",
            "Acesso a publicações científicas verificadas e pesquisas acadêmicas de instituições brasileiras.",
        ),
    ]),
]


def search_url(text: str) -> str:
    return GOOGLE_SEARCH_URL + quote_plus(text[:SOURCE_LIMITS.SEARCH_QUERY_LENGTH])


def suggest_official_sources(text: str) -> List[VerdictSource]:
    """Official Brazilian portals relevant to the topics mentioned in ``text``."""
    lowered = text.lower()
    results: List[VerdictSource] = []
    for pattern, sources in TOPIC_RULES:
        if pattern.search(lowered):
            results.extend(dict(s) for s in sources)
    return results[:SOURCE_LIMITS.MAX_REFERENCE_SOURCES]


def search_source(text: str) -> VerdictSource:
    return _source(
        "Análise de Verificação de Fatos",
        search_url(text),
        "Busca realizada para verificar a veracidade da informação",
    )


def manual_verification_sources(text: str) -> List[VerdictSource]:
    return [
        _source(
            "Verificação Manual Recomendada",
            search_url(text),
            "Consulte fontes oficiais, veículos de comunicação respeitados e órgãos competentes para verificar esta informação.",
        ),
        _source(
            "Portal do Governo Federal",
            "https://www.gov.br/",
            "Consulte sites oficiais do governo, universidades e veículos de imprensa confiáveis para verificar a informação.",
        ),
    ]
