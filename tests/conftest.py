"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

from tests.test_constants import TEST_LLM_API_KEY, TEST_SECRET_KEY

# Never inherit real credentials or databases from .env when pytest runs
os.environ["DATABASE_URL"] = "postgresql+psycopg://localhost:5432/sermon_wizard_test"
os.environ["LLM_API_KEY"] = TEST_LLM_API_KEY
os.environ["MONTHLY_PASSWORDS"] = ""
os.environ["RATE_LIMIT_PER_MINUTE"] = "0"
os.environ["ACCESS_TIMEZONE"] = "America/Sao_Paulo"
os.environ["SHARE_URL"] = ""
os.environ.setdefault("SECRET_KEY", TEST_SECRET_KEY)

from tests.stubs import StubProvider  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_caches():
    """Fresh settings and provider cache for every test."""
    from sermon_wizard.config import get_settings
    from sermon_wizard.llm.router import clear_provider_cache

    get_settings.cache_clear()
    clear_provider_cache()
    yield
    get_settings.cache_clear()
    clear_provider_cache()


@pytest.fixture
def stub_provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def app(stub_provider: StubProvider):
    """Fresh application whose wizard talks to the stub provider."""
    from sermon_wizard.main import create_app
    from sermon_wizard.services.wizard import SermonWizard

    application = create_app()
    application.state.wizard = SermonWizard(
        provider_factory=lambda: stub_provider,
        timeout_ms=30000,
    )
    return application


@pytest.fixture
def client(app) -> TestClient:
    """FastAPI test client (cookies persist across requests)."""
    return TestClient(app, raise_server_exceptions=False)
