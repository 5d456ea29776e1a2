import pytest
import pytest_asyncio
import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock

sys.path.insert(0, str(Path(__file__).parent.parent))

TEST_ENV = {
    "GEMINI_API_KEY": "test_gemini_key",
    "GEMINI_MODEL": "gemini-1.5-flash",
    "LOG_LEVEL": "WARNING",
}
for _key, _value in TEST_ENV.items():
    os.environ.setdefault(_key, _value)


class FakeClock:
    """Manually advanced time source for the rate limiter."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def gemini_payload(text: str) -> dict:
    """Minimal generateContent response body carrying ``text``."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock all required environment variables."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    return TEST_ENV


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'fact_checks.db'}"


@pytest.fixture
def settings(database_url):
    from config import Settings
    return Settings(GEMINI_API_KEY="test_gemini_key", DATABASE_URL=database_url)


@pytest_asyncio.fixture
async def database(database_url):
    from storage import Database
    db = Database(database_url)
    await db.init_db()
    yield db
    await db.close()


@pytest.fixture
def cache_store(database):
    from storage import CacheStore
    return CacheStore(database.session_factory)


@pytest.fixture
def completion():
    """Stubbed model call; set ``completion.return_value`` per test."""
    return AsyncMock(return_value={
        "raw": {},
        "text": '{"classe": "true", "confianca": 90, "justificativa": "Fato amplamente documentado.", "trechos": []}',
    })


@pytest.fixture
def fact_check_service(cache_store, settings, fake_clock, completion):
    from services import FactCheckService, VerdictRequester
    from utils.rate_limiter import FixedWindowRateLimiter
    return FactCheckService(
        cache=cache_store,
        rate_limiter=FixedWindowRateLimiter(max_requests=10, window_seconds=60, clock=fake_clock),
        requester=VerdictRequester(settings, completion=completion),
        settings=settings,
    )


@pytest.fixture
def test_client(monkeypatch, database_url):
    """TestClient running the app lifespan against a temporary database."""
    from fastapi.testclient import TestClient
    from config import get_settings
    import main

    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("GEMINI_API_KEY", "test_gemini_key")
    get_settings.cache_clear()
    with TestClient(main.app) as client:
        yield client
    get_settings.cache_clear()


@pytest.fixture
def sample_gemini_response():
    """Sample Gemini API response."""
    return gemini_payload(
        '```json\n{"classe": "true", "confianca": 90, '
        '"justificativa": "O Amazonas é o maior estado brasileiro em área territorial.", '
        '"trechos": ["maior estado do Brasil"]}\n```'
    )
